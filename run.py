"""Start the Todo API with uvicorn.

Host, port and log level come from ``todo_api.config.settings``
(``TODO_API_HOST``, ``TODO_API_PORT``, ``TODO_API_LOG_LEVEL``).

Usage:
    python run.py
"""
import uvicorn

from todo_api.config import settings


if __name__ == "__main__":
    uvicorn.run(
        "todo_api.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
