"""Base repository implementation supporting asynchronous SQLModel sessions."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Generic, TypeVar

from sqlalchemy import func
from sqlalchemy.orm.interfaces import LoaderOption
from sqlmodel import SQLModel, select
from sqlmodel.ext.asyncio.session import AsyncSession

ModelType = TypeVar("ModelType", bound=SQLModel)


class BaseRepository(Generic[ModelType]):
    """Shared persistence helpers keyed on an integer ``id`` primary key."""

    def __init__(self, session: AsyncSession, model_type: type[ModelType]) -> None:
        self._session = session
        self._model_type = model_type

    @property
    def session(self) -> AsyncSession:
        return self._session

    async def get(
        self,
        entity_id: int,
        *,
        options: Sequence[LoaderOption] = (),
    ) -> ModelType | None:
        """Return the entity with ``entity_id``, eagerly loading ``options``."""
        if not options:
            return await self._session.get(self._model_type, entity_id)
        model: Any = self._model_type
        statement = (
            select(model)
            .where(model.id == entity_id)
            .options(*options)
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(statement)
        return result.scalar_one_or_none()

    async def exists(self, entity_id: int) -> bool:
        model: Any = self._model_type
        result = await self._session.execute(
            select(func.count()).select_from(model).where(model.id == entity_id)
        )
        return int(result.scalar_one()) > 0

    async def list(self, *, options: Sequence[LoaderOption] = ()) -> list[ModelType]:
        """Return every entity in insertion (primary key) order."""
        model: Any = self._model_type
        result = await self._session.execute(select(model).options(*options).order_by(model.id))
        return list(result.scalars().all())

    async def add(self, instance: ModelType) -> ModelType:
        """Add and flush a new entity instance so its id is populated."""
        self._session.add(instance)
        await self._session.flush()
        return instance

    async def delete(self, instance: ModelType) -> None:
        await self._session.delete(instance)
        await self._session.flush()

    async def refresh(self, instance: ModelType) -> ModelType:
        await self._session.refresh(instance)
        return instance
