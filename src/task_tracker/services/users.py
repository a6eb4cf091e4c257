"""Service layer orchestrating user-related repository operations."""

from __future__ import annotations

import logging

from sqlmodel.ext.asyncio.session import AsyncSession

from ..errors import ConflictError, MismatchError, NotFoundError
from ..models import User
from ..repositories import UserRepository
from ..validation import check_user, ensure_valid

logger = logging.getLogger(__name__)


class UserService:
    """High-level business operations for ``User`` entities."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._repository = UserRepository(session)

    @property
    def repository(self) -> UserRepository:
        """Expose the underlying repository for advanced scenarios."""
        return self._repository

    async def create_user(self, *, name: str) -> User:
        """Validate and persist a new user."""
        ensure_valid(check_user(name))
        user = User(name=name)
        await self._repository.add(user)
        await self._session.commit()
        await self._repository.refresh(user)
        logger.info("User created", extra={"user_id": user.id})
        return user

    async def get_user(self, user_id: int) -> User:
        """Return the user with their assigned tasks loaded."""
        user = await self._repository.get_with_tasks(user_id)
        if user is None:
            raise NotFoundError("user", user_id)
        return user

    async def list_users(self) -> list[User]:
        return await self._repository.list_with_tasks()

    async def update_user(
        self,
        user_id: int,
        *,
        payload_id: int,
        name: str,
        version: int | None = None,
    ) -> User:
        """Replace a user's name.

        ``version`` defaults to the currently stored one, so callers that do
        not track it still get last-writer-wins. A stale ``version`` raises
        :class:`ConflictError`; a user deleted in the meantime raises
        :class:`NotFoundError`.
        """
        if user_id != payload_id:
            raise MismatchError("user", user_id, payload_id)
        ensure_valid(check_user(name))

        if version is None:
            current = await self._repository.get(user_id)
            if current is None:
                raise NotFoundError("user", user_id)
            version = current.version

        applied = await self._repository.update_if_version(user_id, version, name=name)
        if not applied:
            await self._session.rollback()
            if not await self._repository.exists(user_id):
                raise NotFoundError("user", user_id)
            logger.warning(
                "User update rejected for stale version",
                extra={"user_id": user_id, "expected_version": version},
            )
            raise ConflictError("user", user_id)

        await self._session.commit()
        user = await self._repository.get(user_id)
        if user is None:
            raise NotFoundError("user", user_id)
        await self._repository.refresh(user)
        logger.info("User updated", extra={"user_id": user_id, "version": user.version})
        return user

    async def delete_user(self, user_id: int) -> None:
        """Delete a user; their tasks become unassigned and their comments go too."""
        user = await self._repository.get(user_id)
        if user is None:
            raise NotFoundError("user", user_id)
        await self._repository.delete(user)
        await self._session.commit()
        logger.info("User deleted", extra={"user_id": user_id})


__all__ = ["UserService"]
