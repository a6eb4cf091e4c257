"""Field-level rules checked before any mutation reaches a repository.

Each ``check_*`` function returns every violation it finds rather than
stopping at the first, and ``ensure_valid`` turns a non-empty list into a
single :class:`~task_tracker.errors.ValidationError`.
"""

from __future__ import annotations

from typing import Any

from .errors import ValidationError
from .models import DESCRIPTION_MAX_LENGTH, TITLE_MAX_LENGTH, USER_NAME_MAX_LENGTH, TaskStatus
from .schemas.system import FieldError

TASK_STATUS_VALUES = tuple(status.value for status in TaskStatus)


def _required_text(field: str, value: Any, *, label: str, max_length: int | None = None) -> list[FieldError]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return [FieldError(field=field, message=f"{label} is required.", type="missing")]
    if not isinstance(value, str):
        return [FieldError(field=field, message=f"{label} must be a string.", type="string_type")]
    if max_length is not None and len(value) > max_length:
        return [
            FieldError(
                field=field,
                message=f"{label} cannot exceed {max_length} characters.",
                type="string_too_long",
            )
        ]
    return []


def check_task(title: Any, description: Any, status: Any) -> list[FieldError]:
    errors = _required_text("title", title, label="Title", max_length=TITLE_MAX_LENGTH)
    errors += _required_text(
        "description",
        description,
        label="Description",
        max_length=DESCRIPTION_MAX_LENGTH,
    )
    raw_status = status.value if isinstance(status, TaskStatus) else status
    if raw_status is None or raw_status == "":
        errors.append(FieldError(field="status", message="Status is required.", type="missing"))
    elif raw_status not in TASK_STATUS_VALUES:
        allowed = ", ".join(f"'{value}'" for value in TASK_STATUS_VALUES)
        errors.append(
            FieldError(field="status", message=f"Status must be one of {allowed}.", type="enum")
        )
    return errors


def check_user(name: Any) -> list[FieldError]:
    return _required_text("name", name, label="Name", max_length=USER_NAME_MAX_LENGTH)


def check_comment(content: Any, task_id: Any, user_id: Any) -> list[FieldError]:
    errors = _required_text("content", content, label="Content")
    if task_id is None:
        errors.append(FieldError(field="task_id", message="Task id is required.", type="missing"))
    if user_id is None:
        errors.append(FieldError(field="user_id", message="User id is required.", type="missing"))
    return errors


def ensure_valid(errors: list[FieldError]) -> None:
    """Raise ``ValidationError`` carrying all ``errors`` if there are any."""
    if errors:
        raise ValidationError(errors)


__all__ = [
    "TASK_STATUS_VALUES",
    "check_comment",
    "check_task",
    "check_user",
    "ensure_valid",
]
