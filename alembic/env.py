"""Run task tracker migrations against ``Settings.database_url``."""

from __future__ import annotations

import asyncio
import sys
from logging.config import fileConfig
from pathlib import Path
from typing import Any

from alembic import context
from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import async_engine_from_config

sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

from sqlmodel import SQLModel  # noqa: E402

import task_tracker.models  # noqa: E402,F401  registers users, tasks, comments
from task_tracker.core.config import get_settings  # noqa: E402

alembic_config = context.config
if alembic_config.config_file_name is not None:
    fileConfig(alembic_config.config_file_name)

database_url = get_settings().database_url
alembic_config.set_main_option("sqlalchemy.url", database_url)

# SQLite cannot ALTER constraints in place; batch mode rebuilds the table.
MIGRATION_OPTIONS: dict[str, Any] = {
    "target_metadata": SQLModel.metadata,
    "compare_type": True,
    "render_as_batch": database_url.startswith("sqlite"),
}


def _migrate_offline() -> None:
    context.configure(
        url=database_url,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **MIGRATION_OPTIONS,
    )
    with context.begin_transaction():
        context.run_migrations()


def _migrate_with(connection: Connection) -> None:
    context.configure(connection=connection, **MIGRATION_OPTIONS)
    with context.begin_transaction():
        context.run_migrations()


async def _migrate_online() -> None:
    engine = async_engine_from_config(
        alembic_config.get_section(alembic_config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    try:
        async with engine.connect() as connection:
            await connection.run_sync(_migrate_with)
    finally:
        await engine.dispose()


if context.is_offline_mode():
    _migrate_offline()
else:
    asyncio.run(_migrate_online())
