"""Task table model and status vocabulary."""

from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional

import sqlalchemy as sa
from sqlalchemy import event
from sqlmodel import Field, Relationship, SQLModel

from .common import utcnow

if TYPE_CHECKING:  # pragma: no cover - imported for typing only
    from .comment import Comment
    from .user import User

TITLE_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 500


class TaskStatus(str, Enum):
    """Closed set of task states."""

    PENDING = "En attente"
    IN_PROGRESS = "En cours"
    COMPLETED = "Terminée"


class Task(SQLModel, table=True):
    """Persistent task, optionally assigned to a user."""

    __tablename__ = "tasks"

    id: int | None = Field(default=None, primary_key=True)
    title: str = Field(
        sa_column=sa.Column(sa.String(length=TITLE_MAX_LENGTH), nullable=False),
    )
    description: str = Field(
        sa_column=sa.Column(sa.String(length=DESCRIPTION_MAX_LENGTH), nullable=False),
    )
    status: TaskStatus = Field(
        sa_column=sa.Column(
            sa.Enum(
                TaskStatus,
                name="task_status",
                native_enum=False,
                validate_strings=True,
                values_callable=lambda members: [member.value for member in members],
            ),
            nullable=False,
        ),
    )
    created_at: datetime = Field(
        default_factory=utcnow,
        sa_column=sa.Column(sa.DateTime(timezone=True), nullable=False),
    )
    user_id: int | None = Field(
        default=None,
        sa_column=sa.Column(
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="SET NULL"),
            nullable=True,
            index=True,
        ),
    )

    assigned_user: Optional["User"] = Relationship(back_populates="tasks")
    comments: list["Comment"] = Relationship(
        back_populates="task",
        sa_relationship_kwargs={"cascade": "all, delete-orphan"},
    )


@event.listens_for(Task, "before_insert")
def _stamp_created_at(mapper: Any, connection: Any, target: Task) -> None:
    # Creation time is always server-assigned, whatever the caller supplied.
    target.created_at = utcnow()


__all__ = ["DESCRIPTION_MAX_LENGTH", "TITLE_MAX_LENGTH", "Task", "TaskStatus"]
