from __future__ import annotations

import pytest

from task_tracker.errors import ValidationError
from task_tracker.models import TaskStatus
from task_tracker.validation import TASK_STATUS_VALUES, check_comment, check_task, check_user, ensure_valid


def test_status_vocabulary_is_closed() -> None:
    assert TASK_STATUS_VALUES == ("En attente", "En cours", "Terminée")


@pytest.mark.parametrize("task_status", list(TaskStatus) + [status.value for status in TaskStatus])
def test_valid_task_passes(task_status) -> None:
    assert check_task("Title", "Description", task_status) == []


def test_task_errors_are_collected_per_field() -> None:
    errors = check_task("   ", "x" * 501, "Done")

    assert [(error.field, error.type) for error in errors] == [
        ("title", "missing"),
        ("description", "string_too_long"),
        ("status", "enum"),
    ]


def test_task_title_length_boundary() -> None:
    assert check_task("x" * 100, "ok", "En cours") == []
    assert [error.field for error in check_task("x" * 101, "ok", "En cours")] == ["title"]


def test_missing_status_is_reported_as_missing() -> None:
    errors = check_task("Title", "Description", None)

    assert [(error.field, error.type) for error in errors] == [("status", "missing")]


def test_user_and_comment_rules() -> None:
    assert [error.field for error in check_user("")] == ["name"]
    assert check_user("Camille") == []
    assert [error.field for error in check_comment("", None, None)] == ["content", "task_id", "user_id"]


def test_ensure_valid_raises_with_all_errors() -> None:
    errors = check_task(None, None, None)

    with pytest.raises(ValidationError) as excinfo:
        ensure_valid(errors)

    assert excinfo.value.status_code == 422
    assert [item["field"] for item in excinfo.value.details["errors"]] == ["title", "description", "status"]
    ensure_valid([])
