"""Service layer for comments attached to tasks."""

from __future__ import annotations

import logging
from datetime import datetime

from sqlmodel.ext.asyncio.session import AsyncSession

from ..errors import NotFoundError
from ..models import Comment, as_utc, utcnow
from ..repositories import CommentRepository, TaskRepository, UserRepository
from ..validation import check_comment, ensure_valid

logger = logging.getLogger(__name__)


class CommentService:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._repository = CommentRepository(session)
        self._task_repository = TaskRepository(session)
        self._user_repository = UserRepository(session)

    async def create_comment(
        self,
        *,
        content: str,
        task_id: int,
        user_id: int,
        created_at: datetime | None = None,
    ) -> Comment:
        """Attach a comment to an existing task on behalf of an existing user.

        A supplied ``created_at`` is stored as given (normalised to UTC).
        """
        ensure_valid(check_comment(content, task_id, user_id))
        if not await self._task_repository.exists(task_id):
            raise NotFoundError("task", task_id)
        if not await self._user_repository.exists(user_id):
            raise NotFoundError("user", user_id)

        comment = Comment(
            content=content,
            task_id=task_id,
            user_id=user_id,
            created_at=as_utc(created_at) if created_at is not None else utcnow(),
        )
        await self._repository.add(comment)
        await self._session.commit()
        await self._repository.refresh(comment)
        logger.info("Comment created", extra={"comment_id": comment.id, "task_id": task_id})
        return comment

    async def get_comment(self, comment_id: int) -> Comment:
        comment = await self._repository.get(comment_id)
        if comment is None:
            raise NotFoundError("comment", comment_id)
        return comment

    async def list_comments_for_task(self, task_id: int) -> list[Comment]:
        """Return a task's comments in creation order; the task must exist."""
        if not await self._task_repository.exists(task_id):
            raise NotFoundError("task", task_id)
        return await self._repository.list_for_task(task_id)

    async def delete_comment(self, comment_id: int) -> None:
        comment = await self._repository.get(comment_id)
        if comment is None:
            raise NotFoundError("comment", comment_id)
        await self._repository.delete(comment)
        await self._session.commit()
        logger.info("Comment deleted", extra={"comment_id": comment_id})


__all__ = ["CommentService"]
