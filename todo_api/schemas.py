from pydantic import BaseModel
from typing import Any, Optional, List
from todo_api.models import TaskStatus


class TaskPayload(BaseModel):
    # Request bodies are parsed loosely: unknown keys are dropped,
    # known ones must carry the right type.
    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[str] = None

    model_config = {"extra": "ignore"}


class TaskResponse(BaseModel):
    id: int
    title: str
    description: str
    status: TaskStatus
    create_time: str
    update_time: str


class StatusResponse(BaseModel):
    status: str
    tasks_count: int
    service: str


class ErrorResponse(BaseModel):
    error: str
    id: Optional[int] = None
    valid_statuses: Optional[List[str]] = None
    details: Optional[Any] = None
