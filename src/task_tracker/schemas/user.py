"""User-related Pydantic schemas."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from ..models import USER_NAME_MAX_LENGTH
from .fields import NonBlankStr
from .task import TaskRead


class UserCreate(BaseModel):
    """Payload for creating a user."""

    model_config = ConfigDict(json_schema_extra={"example": {"name": "Camille Martin"}})

    name: NonBlankStr = Field(min_length=1, max_length=USER_NAME_MAX_LENGTH)


class UserUpdate(BaseModel):
    """Full replacement payload for an existing user.

    ``id`` must repeat the path identifier. ``version`` is optional: when
    given, the update only applies if the stored row still carries it.
    """

    model_config = ConfigDict(
        json_schema_extra={"example": {"id": 1, "name": "Camille Dupont", "version": 1}}
    )

    id: int
    name: NonBlankStr = Field(min_length=1, max_length=USER_NAME_MAX_LENGTH)
    version: int | None = Field(default=None, ge=1)


class UserRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    version: int


class UserDetail(UserRead):
    """User together with the tasks assigned to them."""

    tasks: list[TaskRead] = Field(default_factory=list)


__all__ = ["UserCreate", "UserDetail", "UserRead", "UserUpdate"]
