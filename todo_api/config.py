from typing import List

from dotenv import load_dotenv
from pydantic_settings import BaseSettings

# Load environment variables from .env file
load_dotenv()

class Settings(BaseSettings):
    service_name: str = "Todo API"
    host: str = "0.0.0.0"
    port: int = 8080
    log_level: str = "INFO"
    seed_examples: bool = True
    cors_origins: List[str] = ["*"]

    class Config:
        env_prefix = "TODO_API_"
        env_file = ".env"
        extra = "ignore"

settings = Settings()
