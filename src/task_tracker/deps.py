"""Reusable FastAPI dependencies."""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Annotated

from fastapi import Depends
from sqlmodel.ext.asyncio.session import AsyncSession

from .core.config import Settings, get_settings
from .db.session import get_session
from .services import CommentService, TaskExportService, TaskService, UserService


async def get_db_session() -> AsyncIterator[AsyncSession]:
    """FastAPI dependency that yields a database session."""

    async for session in get_session():
        yield session


SettingsDependency = Annotated[Settings, Depends(get_settings)]
DatabaseSessionDependency = Annotated[AsyncSession, Depends(get_db_session)]


def get_user_service(session: DatabaseSessionDependency) -> UserService:
    return UserService(session)


def get_task_service(session: DatabaseSessionDependency) -> TaskService:
    return TaskService(session)


def get_comment_service(session: DatabaseSessionDependency) -> CommentService:
    return CommentService(session)


def get_export_service(session: DatabaseSessionDependency) -> TaskExportService:
    return TaskExportService(session)


UserServiceDependency = Annotated[UserService, Depends(get_user_service)]
TaskServiceDependency = Annotated[TaskService, Depends(get_task_service)]
CommentServiceDependency = Annotated[CommentService, Depends(get_comment_service)]
ExportServiceDependency = Annotated[TaskExportService, Depends(get_export_service)]


__all__ = [
    "CommentServiceDependency",
    "DatabaseSessionDependency",
    "ExportServiceDependency",
    "SettingsDependency",
    "TaskServiceDependency",
    "UserServiceDependency",
    "get_db_session",
]
