"""Domain service layer package."""

from __future__ import annotations

from .comments import CommentService
from .export import TaskExportService
from .tasks import TaskService
from .users import UserService

__all__ = ["CommentService", "TaskExportService", "TaskService", "UserService"]
