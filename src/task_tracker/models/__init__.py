"""Table models for users, tasks and comments."""

from __future__ import annotations

from .comment import Comment
from .common import as_utc, utcnow
from .task import DESCRIPTION_MAX_LENGTH, TITLE_MAX_LENGTH, Task, TaskStatus
from .user import USER_NAME_MAX_LENGTH, User

__all__ = [
    "Comment",
    "DESCRIPTION_MAX_LENGTH",
    "TITLE_MAX_LENGTH",
    "Task",
    "TaskStatus",
    "USER_NAME_MAX_LENGTH",
    "User",
    "as_utc",
    "utcnow",
]
