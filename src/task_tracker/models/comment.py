"""Comment table model."""

from datetime import datetime
from typing import TYPE_CHECKING, Optional

import sqlalchemy as sa
from sqlmodel import Field, Relationship, SQLModel

from .common import utcnow

if TYPE_CHECKING:  # pragma: no cover - imported for typing only
    from .task import Task
    from .user import User


class Comment(SQLModel, table=True):
    """A note attached to a task and written by a user.

    Unlike tasks, ``created_at`` is taken from the caller when supplied.
    """

    __tablename__ = "comments"

    id: int | None = Field(default=None, primary_key=True)
    content: str = Field(sa_column=sa.Column(sa.Text(), nullable=False))
    task_id: int = Field(
        sa_column=sa.Column(
            sa.Integer(),
            sa.ForeignKey("tasks.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
    )
    user_id: int = Field(
        sa_column=sa.Column(
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
    )
    created_at: datetime = Field(
        default_factory=utcnow,
        sa_column=sa.Column(sa.DateTime(timezone=True), nullable=False),
    )

    task: Optional["Task"] = Relationship(back_populates="comments")
    author: Optional["User"] = Relationship(back_populates="comments")


__all__ = ["Comment"]
