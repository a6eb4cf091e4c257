"""User table model."""

from typing import TYPE_CHECKING

import sqlalchemy as sa
from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:  # pragma: no cover - imported for typing only
    from .comment import Comment
    from .task import Task

USER_NAME_MAX_LENGTH = 255


class User(SQLModel, table=True):
    """A person tasks can be assigned to and who authors comments.

    ``version`` is an optimistic concurrency token: every successful update
    increments it, and an update carrying a stale value is rejected.
    """

    __tablename__ = "users"

    id: int | None = Field(default=None, primary_key=True)
    name: str = Field(
        sa_column=sa.Column(sa.String(length=USER_NAME_MAX_LENGTH), nullable=False),
    )
    version: int = Field(
        default=1,
        sa_column=sa.Column(sa.Integer(), nullable=False, server_default="1"),
    )

    # Deleting a user leaves their tasks unassigned (the ORM nulls tasks.user_id).
    tasks: list["Task"] = Relationship(back_populates="assigned_user")
    comments: list["Comment"] = Relationship(
        back_populates="author",
        sa_relationship_kwargs={"cascade": "all, delete-orphan"},
    )


__all__ = ["USER_NAME_MAX_LENGTH", "User"]
