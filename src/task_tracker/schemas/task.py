"""Task-related Pydantic schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..models import DESCRIPTION_MAX_LENGTH, TITLE_MAX_LENGTH, TaskStatus, as_utc
from .comment import CommentRead
from .fields import NonBlankStr

TASK_READ_EXAMPLE = {
    "id": 1,
    "title": "Préparer la démo",
    "description": "Rassembler les captures pour la revue de sprint.",
    "status": TaskStatus.PENDING.value,
    "created_at": "2024-12-02T20:19:45Z",
    "user_id": 3,
}


class _TaskFields(BaseModel):
    title: NonBlankStr = Field(min_length=1, max_length=TITLE_MAX_LENGTH)
    description: NonBlankStr = Field(min_length=1, max_length=DESCRIPTION_MAX_LENGTH)
    status: TaskStatus
    user_id: int | None = Field(default=None, description="Assigned user, if any.")


class TaskCreate(_TaskFields):
    """Payload for creating a task. Any ``created_at`` sent is ignored."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": TASK_READ_EXAMPLE["title"],
                "description": TASK_READ_EXAMPLE["description"],
                "status": TaskStatus.PENDING.value,
                "user_id": 3,
            }
        }
    )


class TaskUpdate(_TaskFields):
    """Full replacement payload; ``id`` must repeat the path identifier."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": 1,
                "title": TASK_READ_EXAMPLE["title"],
                "description": TASK_READ_EXAMPLE["description"],
                "status": TaskStatus.IN_PROGRESS.value,
                "user_id": None,
            }
        }
    )

    id: int


class TaskRead(BaseModel):
    """Public representation of a task's own columns."""

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={"example": TASK_READ_EXAMPLE},
    )

    id: int
    title: str
    description: str
    status: TaskStatus
    created_at: datetime
    user_id: int | None = None

    @field_validator("created_at")
    @classmethod
    def _created_at_utc(cls, value: datetime) -> datetime:
        # SQLite hands back naive values; they were stored as UTC.
        return as_utc(value)


class AssignedUser(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str


class TaskWithUser(TaskRead):
    assigned_user: AssignedUser | None = None


class TaskDetail(TaskWithUser):
    """Task with its assigned user and comments resolved."""

    comments: list[CommentRead] = Field(default_factory=list)


class TaskAssignment(BaseModel):
    message: str = "Task assigned successfully"
    task: TaskRead


class UserTaskCount(BaseModel):
    user_id: int
    user_name: str
    task_count: int = Field(ge=0)


class TaskStatistics(BaseModel):
    """Aggregate counts across every stored task."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "total_tasks": 3,
                "tasks_by_status": {TaskStatus.PENDING.value: 2, TaskStatus.COMPLETED.value: 1},
                "tasks_by_user": [
                    {"user_id": 1, "user_name": "Camille", "task_count": 2},
                    {"user_id": 2, "user_name": "Alex", "task_count": 0},
                ],
            }
        }
    )

    total_tasks: int = Field(ge=0)
    tasks_by_status: dict[str, int] = Field(default_factory=dict)
    tasks_by_user: list[UserTaskCount] = Field(default_factory=list)


__all__ = [
    "AssignedUser",
    "TaskAssignment",
    "TaskCreate",
    "TaskDetail",
    "TaskRead",
    "TaskStatistics",
    "TaskUpdate",
    "TaskWithUser",
    "UserTaskCount",
]
