# todo_api/validation.py
"""
Request payload checks.

Every check is a pure function of the payload and returns a ``Validation``
holding either the parsed value or the error body to send back with a 400.
Existence of a task is not checked here; the store reports that itself.
"""

import json
from typing import Any, Dict, NamedTuple, Optional

from pydantic import ValidationError

from todo_api.models import Task, TaskStatus
from todo_api.schemas import TaskPayload

TASK_FIELDS = ("title", "description", "status")


class Validation(NamedTuple):
    value: Any = None
    error: Optional[Dict[str, Any]] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def is_status_valid(status: Any) -> bool:
    return status in TaskStatus.values()


def invalid_status_error() -> Dict[str, Any]:
    return {"error": "Invalid status", "valid_statuses": TaskStatus.values()}


def parse_json_body(raw: bytes) -> Validation:
    try:
        body = json.loads(raw)
    except ValueError as e:
        return Validation(error={"error": "Invalid JSON format", "details": str(e)})
    if not isinstance(body, dict):
        return Validation(error={
            "error": "Invalid JSON format",
            "details": f"expected a JSON object, got {type(body).__name__}",
        })
    return Validation(value=body)


def _load_payload(body: Dict[str, Any]) -> Validation:
    try:
        payload = TaskPayload.model_validate(body)
    except ValidationError as e:
        details = [
            {"field": ".".join(str(part) for part in err["loc"]), "message": err["msg"]}
            for err in e.errors()
        ]
        return Validation(error={"error": "Invalid field type", "details": details})
    return Validation(value=payload)


def validate_task_body(body: Dict[str, Any]) -> Validation:
    """Checks a create or full-update body and builds a draft task from it."""
    loaded = _load_payload(body)
    if not loaded.ok:
        return loaded
    payload = loaded.value

    if not payload.title:
        return Validation(error={"error": "Title is required"})
    if payload.status is not None and not is_status_valid(payload.status):
        return Validation(error=invalid_status_error())

    return Validation(value=Task.deserialize(payload.model_dump(exclude_none=True)))


def validate_patch_body(body: Dict[str, Any]) -> Validation:
    """Checks a partial-update body and returns only the fields it sets."""
    present = [key for key in TASK_FIELDS if key in body]
    if not present:
        return Validation(error={"error": "No fields to update"})

    loaded = _load_payload(body)
    if not loaded.ok:
        return loaded
    payload = loaded.value

    nulls = [key for key in present if getattr(payload, key) is None]
    if nulls:
        return Validation(error={
            "error": "Invalid field type",
            "details": [{"field": key, "message": "must not be null"} for key in nulls],
        })
    if "title" in present and not payload.title:
        return Validation(error={"error": "Title is required"})
    if "status" in present and not is_status_valid(payload.status):
        return Validation(error=invalid_status_error())

    return Validation(value={key: getattr(payload, key) for key in present})
