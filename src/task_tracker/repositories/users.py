"""Repository for interacting with user persistence models."""

from __future__ import annotations

from sqlalchemy import update
from sqlalchemy.orm import selectinload
from sqlmodel.ext.asyncio.session import AsyncSession

from ..models import User
from .base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Concrete repository for CRUD operations on ``User`` entities."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, User)

    async def get_with_tasks(self, user_id: int) -> User | None:
        return await self.get(user_id, options=[selectinload(User.tasks)])

    async def list_with_tasks(self) -> list[User]:
        return await self.list(options=[selectinload(User.tasks)])

    async def update_if_version(self, user_id: int, expected_version: int, *, name: str) -> bool:
        """Apply ``name`` only if the row still has ``expected_version``.

        Bumps ``version`` on success. Returns ``False`` when no row matched,
        which means the user is gone or was changed by someone else.
        """
        result = await self.session.execute(
            update(User)
            .where(User.id == user_id, User.version == expected_version)
            .values(name=name, version=User.version + 1)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1


__all__ = ["UserRepository"]
