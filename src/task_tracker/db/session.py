"""Database engine and request-scoped session management."""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Any

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from ..core.config import get_settings


def enable_sqlite_foreign_keys(engine: AsyncEngine) -> None:
    """Turn on ``PRAGMA foreign_keys`` for every new SQLite connection.

    SQLite ignores ``ON DELETE`` clauses unless the pragma is set per
    connection; other dialects are left untouched.
    """

    if engine.dialect.name != "sqlite":
        return

    @event.listens_for(engine.sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection: Any, _: Any) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def build_engine(database_url: str, *, echo: bool = False, **kwargs: Any) -> AsyncEngine:
    """Create an async engine with the project's connection defaults applied."""

    created = create_async_engine(database_url, echo=echo, pool_pre_ping=True, **kwargs)
    enable_sqlite_foreign_keys(created)
    return created


settings = get_settings()

engine: AsyncEngine = build_engine(settings.database_url, echo=settings.db_echo)
async_session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def get_session() -> AsyncIterator[AsyncSession]:
    """Yield one unit of work per request, rolling back if the request fails."""

    async with async_session_maker() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


async def init_db() -> None:
    """Create all tables (local development; production uses Alembic)."""

    from .. import models  # noqa: F401  registers table metadata

    async with engine.begin() as connection:
        await connection.run_sync(SQLModel.metadata.create_all)


async def dispose_engine() -> None:
    await engine.dispose()
