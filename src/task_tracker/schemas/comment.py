"""Comment-related Pydantic schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..models import as_utc
from .fields import NonBlankStr


class CommentCreate(BaseModel):
    """Payload for attaching a comment to a task.

    ``created_at`` is stored as given; the server fills in the current time
    only when it is omitted.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "content": "Captures ajoutées au dossier partagé.",
                "task_id": 1,
                "user_id": 3,
                "created_at": "2024-12-02T21:52:06Z",
            }
        }
    )

    content: NonBlankStr = Field(min_length=1)
    task_id: int
    user_id: int
    created_at: datetime | None = None


class CommentRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    content: str
    task_id: int
    user_id: int
    created_at: datetime

    @field_validator("created_at")
    @classmethod
    def _created_at_utc(cls, value: datetime) -> datetime:
        return as_utc(value)


__all__ = ["CommentCreate", "CommentRead"]
