"""Service layer encapsulating task-related operations."""

from __future__ import annotations

import logging
from datetime import datetime

from sqlmodel.ext.asyncio.session import AsyncSession

from ..errors import MismatchError, NotFoundError
from ..models import Task, TaskStatus, as_utc
from ..repositories import TaskRepository, UserRepository
from ..schemas import TaskStatistics, UserTaskCount
from ..validation import check_task, ensure_valid

logger = logging.getLogger(__name__)


class TaskService:
    """High-level business orchestration for ``Task`` entities."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._repository = TaskRepository(session)
        self._user_repository = UserRepository(session)

    @property
    def repository(self) -> TaskRepository:
        """Expose the underlying repository for advanced scenarios."""
        return self._repository

    async def _ensure_user_exists(self, user_id: int | None) -> None:
        if user_id is not None and not await self._user_repository.exists(user_id):
            raise NotFoundError("user", user_id)

    async def create_task(
        self,
        *,
        title: str,
        description: str,
        status: TaskStatus | str,
        user_id: int | None = None,
    ) -> Task:
        """Validate and persist a new task; ``created_at`` is set on insert."""
        ensure_valid(check_task(title, description, status))
        await self._ensure_user_exists(user_id)
        task = Task(
            title=title,
            description=description,
            status=TaskStatus(status),
            user_id=user_id,
        )
        await self._repository.add(task)
        await self._session.commit()
        await self._repository.refresh(task)
        logger.info("Task created", extra={"task_id": task.id, "user_id": user_id})
        return task

    async def get_task(self, task_id: int) -> Task:
        """Return a task with its assigned user and comments loaded."""
        task = await self._repository.get_detail(task_id)
        if task is None:
            raise NotFoundError("task", task_id)
        return task

    async def list_tasks(self, *, status: TaskStatus | None = None) -> list[Task]:
        """Return all tasks, optionally only those in ``status``."""
        return await self._repository.list_filtered(status=status, with_user=True)

    async def update_task(
        self,
        task_id: int,
        *,
        payload_id: int,
        title: str,
        description: str,
        status: TaskStatus | str,
        user_id: int | None = None,
    ) -> Task:
        """Replace every mutable field of a task. ``created_at`` is preserved."""
        if task_id != payload_id:
            raise MismatchError("task", task_id, payload_id)
        ensure_valid(check_task(title, description, status))
        task = await self._repository.get(task_id)
        if task is None:
            raise NotFoundError("task", task_id)
        await self._ensure_user_exists(user_id)

        task.title = title
        task.description = description
        task.status = TaskStatus(status)
        task.user_id = user_id
        await self._session.commit()
        await self._repository.refresh(task)
        logger.info("Task updated", extra={"task_id": task_id})
        return task

    async def delete_task(self, task_id: int) -> None:
        """Delete a task together with its comments."""
        task = await self._repository.get(task_id)
        if task is None:
            raise NotFoundError("task", task_id)
        await self._repository.delete(task)
        await self._session.commit()
        logger.info("Task deleted", extra={"task_id": task_id})

    async def assign_task(self, task_id: int, user_id: int) -> Task:
        """Point a task at a user. Nothing changes if either one is missing."""
        task = await self._repository.get(task_id)
        if task is None:
            raise NotFoundError("task", task_id)
        await self._ensure_user_exists(user_id)
        task.user_id = user_id
        await self._session.commit()
        await self._repository.refresh(task)
        logger.info("Task assigned", extra={"task_id": task_id, "user_id": user_id})
        return task

    async def search_tasks(
        self,
        *,
        keyword: str | None = None,
        assigned_to: int | None = None,
        created_after: datetime | None = None,
    ) -> list[Task]:
        """Filter tasks by keyword and creation time.

        ``assigned_to`` is accepted for compatibility with existing clients
        but does not narrow the result.
        """
        if assigned_to is not None:
            logger.debug("Ignoring assigned_to search filter", extra={"assigned_to": assigned_to})
        return await self._repository.search(
            keyword=keyword or None,
            created_after=as_utc(created_after) if created_after is not None else None,
        )

    async def get_statistics(self) -> TaskStatistics:
        """Return the total, per-status and per-user task counts."""
        total = await self._repository.count_all()
        by_status = await self._repository.count_by_status()
        by_user = await self._repository.count_by_user()
        return TaskStatistics(
            total_tasks=total,
            tasks_by_status={status.value: count for status, count in by_status.items()},
            tasks_by_user=[
                UserTaskCount(user_id=user_id, user_name=name, task_count=count)
                for user_id, name, count in by_user
            ],
        )


__all__ = ["TaskService"]
