# tests/test_validation.py

from todo_api.models import TaskStatus
from todo_api.validation import (
    is_status_valid,
    parse_json_body,
    validate_patch_body,
    validate_task_body,
)

VALID_STATUSES = ["todo", "in_progress", "done"]


def test_is_status_valid() -> None:
    for status in VALID_STATUSES:
        assert is_status_valid(status)
    assert not is_status_valid("archived")
    assert not is_status_valid("")
    assert not is_status_valid(None)


def test_parse_json_body() -> None:
    assert parse_json_body(b'{"title": "x"}').value == {"title": "x"}

    broken = parse_json_body(b'{"title": ')
    assert not broken.ok
    assert broken.error["error"] == "Invalid JSON format"
    assert "details" in broken.error

    assert parse_json_body(b"").error["error"] == "Invalid JSON format"
    assert parse_json_body(b"[1, 2]").error["error"] == "Invalid JSON format"


def test_task_body_requires_title() -> None:
    assert validate_task_body({}).error == {"error": "Title is required"}
    assert validate_task_body({"title": ""}).error == {"error": "Title is required"}
    assert validate_task_body({"title": None}).error == {"error": "Title is required"}


def test_task_body_rejects_unknown_status() -> None:
    result = validate_task_body({"title": "x", "status": "archived"})

    assert result.error == {"error": "Invalid status", "valid_statuses": VALID_STATUSES}


def test_task_body_rejects_wrong_types() -> None:
    result = validate_task_body({"title": 12})

    assert result.error["error"] == "Invalid field type"
    assert result.error["details"][0]["field"] == "title"


def test_task_body_builds_draft() -> None:
    result = validate_task_body({"title": "Buy milk", "id": 5, "extra": True})

    assert result.ok
    draft = result.value
    assert draft.id == 0
    assert draft.title == "Buy milk"
    assert draft.description == ""
    assert draft.status == TaskStatus.TODO


def test_patch_body_needs_a_known_field() -> None:
    assert validate_patch_body({}).error == {"error": "No fields to update"}
    assert validate_patch_body({"priority": "high"}).error == {"error": "No fields to update"}


def test_patch_body_returns_only_present_fields() -> None:
    result = validate_patch_body({"status": "done", "colour": "red"})

    assert result.ok
    assert result.value == {"status": "done"}


def test_patch_body_rejects_invalid_values() -> None:
    assert validate_patch_body({"status": "archived"}).error == {
        "error": "Invalid status",
        "valid_statuses": VALID_STATUSES,
    }
    assert validate_patch_body({"title": ""}).error == {"error": "Title is required"}
    assert validate_patch_body({"description": None}).error["error"] == "Invalid field type"
    assert validate_patch_body({"description": 3}).error["error"] == "Invalid field type"
