# todo_api/models.py

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


class TaskStatus(str, Enum):
    TODO = "todo"
    IN_PROGRESS = "in_progress"
    DONE = "done"

    @classmethod
    def values(cls) -> list:
        return [status.value for status in cls]


@dataclass
class Task:
    """
    A single to-do item.

    Records with ``id == 0`` are drafts: they have not been stored yet.
    Ids, ``create_time`` and ``update_time`` are assigned by ``TaskStore``.
    """

    id: int = 0
    title: str = ""
    description: str = ""
    status: TaskStatus = TaskStatus.TODO
    create_time: datetime = field(default_factory=datetime.now)
    update_time: datetime = field(default_factory=datetime.now)

    def touch(self, now: datetime) -> None:
        # update_time never moves backwards, even if the clock does
        self.update_time = max(now, self.update_time)

    def serialize(self) -> Dict[str, Any]:
        try:
            return {
                "id": self.id,
                "title": self.title,
                "description": self.description,
                "status": TaskStatus(self.status).value,
                "create_time": self.create_time.strftime(TIME_FORMAT),
                "update_time": self.update_time.strftime(TIME_FORMAT),
            }
        except Exception as e:
            logger.error(f"Failed to serialize task {self.id}: {e}")
            return {"error": "Failed to serialize task"}

    @classmethod
    def deserialize(cls, data: Mapping, now: Optional[datetime] = None) -> "Task":
        """Build a draft from loosely typed input, reading only known fields."""
        if not isinstance(data, Mapping):
            raise TypeError(f"expected a mapping, got {type(data).__name__}")
        now = now or datetime.now()
        task = cls(create_time=now, update_time=now)
        if data.get("title") is not None:
            task.title = str(data["title"])
        if data.get("description") is not None:
            task.description = str(data["description"])
        if data.get("status") is not None:
            task.status = TaskStatus(data["status"])
        return task
