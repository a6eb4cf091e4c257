"""Repository for task queries, including search and aggregates."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import func, or_
from sqlalchemy.orm import selectinload
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from ..models import Task, TaskStatus, User
from .base import BaseRepository


class TaskRepository(BaseRepository[Task]):
    """Concrete repository encapsulating ``Task`` persistence operations."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Task)

    async def get_detail(self, task_id: int) -> Task | None:
        """Return a task with its assigned user and comments loaded."""
        return await self.get(
            task_id,
            options=[selectinload(Task.assigned_user), selectinload(Task.comments)],
        )

    async def list_filtered(
        self,
        *,
        status: TaskStatus | None = None,
        with_user: bool = False,
    ) -> list[Task]:
        """Return tasks in insertion order, optionally narrowed to one status."""
        query = select(Task)
        if status is not None:
            query = query.where(Task.status == status)
        if with_user:
            query = query.options(selectinload(Task.assigned_user))
        result = await self.session.execute(query.order_by(Task.id))
        return list(result.scalars().all())

    async def search(
        self,
        *,
        keyword: str | None = None,
        created_after: datetime | None = None,
    ) -> list[Task]:
        """Match ``keyword`` as a substring of title or description.

        Matching uses the store's ``LIKE``: case-insensitive for ASCII on
        SQLite, case-sensitive on PostgreSQL. Wildcards in ``keyword`` are
        escaped.
        """
        query = select(Task)
        if keyword:
            query = query.where(
                or_(
                    Task.title.contains(keyword, autoescape=True),
                    Task.description.contains(keyword, autoescape=True),
                )
            )
        if created_after is not None:
            query = query.where(Task.created_at >= created_after)
        result = await self.session.execute(query.order_by(Task.id))
        return list(result.scalars().all())

    async def count_all(self) -> int:
        result = await self.session.execute(select(func.count()).select_from(Task))
        return int(result.scalar_one())

    async def count_by_status(self) -> dict[TaskStatus, int]:
        result = await self.session.execute(
            select(Task.status, func.count(Task.id)).group_by(Task.status)
        )
        return {TaskStatus(status): int(count) for status, count in result.all()}

    async def count_by_user(self) -> list[tuple[int, str, int]]:
        """Return ``(user_id, name, task_count)`` for every user, zero included."""
        result = await self.session.execute(
            select(User.id, User.name, func.count(Task.id))
            .select_from(User)
            .outerjoin(Task, Task.user_id == User.id)
            .group_by(User.id, User.name)
            .order_by(User.id)
        )
        return [(int(user_id), name, int(count)) for user_id, name, count in result.all()]


__all__ = ["TaskRepository"]
