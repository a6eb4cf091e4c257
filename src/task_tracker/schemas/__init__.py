"""Pydantic schemas for public interfaces."""

from __future__ import annotations

from .comment import CommentCreate, CommentRead
from .system import ErrorResponse, FieldError, HealthCheckResponse, RootResponse
from .task import (
    AssignedUser,
    TaskAssignment,
    TaskCreate,
    TaskDetail,
    TaskRead,
    TaskStatistics,
    TaskUpdate,
    TaskWithUser,
    UserTaskCount,
)
from .user import UserCreate, UserDetail, UserRead, UserUpdate

__all__ = [
    "AssignedUser",
    "CommentCreate",
    "CommentRead",
    "ErrorResponse",
    "FieldError",
    "HealthCheckResponse",
    "RootResponse",
    "TaskAssignment",
    "TaskCreate",
    "TaskDetail",
    "TaskRead",
    "TaskStatistics",
    "TaskUpdate",
    "TaskWithUser",
    "UserCreate",
    "UserDetail",
    "UserRead",
    "UserTaskCount",
    "UserUpdate",
]
