# todo_api/store.py

import logging
import threading
from dataclasses import replace
from datetime import datetime
from typing import Callable, Dict, List, Mapping, Optional

from fastapi import Request

from todo_api.models import Task, TaskStatus

logger = logging.getLogger(__name__)

PATCHABLE_FIELDS = ("title", "description", "status")

EXAMPLE_TASKS = [
    ("Buy milk", "Fat 3.2%", TaskStatus.TODO),
    ("Run API", "Configure and start server", TaskStatus.IN_PROGRESS),
    ("Explore Postman", "Check REST API", TaskStatus.DONE),
]


class TaskStore:
    """
    In-memory registry of tasks.

    All state sits behind one lock, held for the whole of every operation.
    Records handed out are copies, so callers can't change stored state
    without going through the store. Absent ids and values that would break a
    record (empty title, unknown status) are reported through
    ``None``/``False`` results, never exceptions.
    """

    def __init__(self, clock: Callable[[], datetime] = datetime.now):
        self._tasks: Dict[int, Task] = {}
        self._next_id = 1
        self._lock = threading.Lock()
        self._clock = clock

    def create(self, draft: Task) -> Optional[Task]:
        """Stores a copy of ``draft`` under a fresh id. Returns ``None`` for an unstorable draft."""
        if not _storable(draft.title, draft.status):
            return None
        with self._lock:
            now = self._clock()
            task = replace(
                draft,
                id=self._next_id,
                status=TaskStatus(draft.status),
                create_time=now,
                update_time=now,
            )
            self._next_id += 1
            self._tasks[task.id] = task
            logger.info(f"Task created: {task.id}")
            return replace(task)

    def get_all(self) -> List[Task]:
        with self._lock:
            # ids are handed out in increasing order and dicts keep insertion order
            return [replace(task) for task in self._tasks.values()]

    def get(self, task_id: int) -> Optional[Task]:
        with self._lock:
            task = self._tasks.get(task_id)
            return replace(task) if task is not None else None

    def update(self, task_id: int, replacement: Task) -> bool:
        if not _storable(replacement.title, replacement.status):
            return False
        with self._lock:
            task = self._tasks.get(task_id)
            if task is None:
                return False
            task.title = replacement.title
            task.description = replacement.description
            task.status = TaskStatus(replacement.status)
            task.touch(self._clock())
            logger.info(f"Task updated: {task_id}")
            return True

    def patch_update(self, task_id: int, fields: Mapping) -> bool:
        """
        Applies the known fields present in ``fields``.

        Returns ``False`` without touching anything when the id is absent,
        when no known field is present, or when a value would leave the
        task with an empty title, a non-text description or a bad status.
        """
        updates = {key: fields[key] for key in PATCHABLE_FIELDS if key in fields}
        if not updates:
            return False
        if not _storable(updates.get("title", "-"), updates.get("status", TaskStatus.TODO)):
            return False
        if not isinstance(updates.get("description", ""), str):
            return False
        if "status" in updates:
            updates["status"] = TaskStatus(updates["status"])

        with self._lock:
            task = self._tasks.get(task_id)
            if task is None:
                return False
            for key, value in updates.items():
                setattr(task, key, value)
            task.touch(self._clock())
            logger.info(f"Task patched: {task_id} ({', '.join(updates)})")
            return True

    def delete(self, task_id: int) -> bool:
        with self._lock:
            removed = self._tasks.pop(task_id, None) is not None
        if removed:
            logger.info(f"Task deleted: {task_id}")
        return removed

    def count(self) -> int:
        with self._lock:
            return len(self._tasks)

    def seed_examples(self) -> List[Task]:
        return [
            self.create(Task(title=title, description=description, status=status))
            for title, description, status in EXAMPLE_TASKS
        ]


def get_store(request: Request) -> TaskStore:
    return request.app.state.store


def _storable(title, status) -> bool:
    return isinstance(title, str) and bool(title) and status in TaskStatus.values()
