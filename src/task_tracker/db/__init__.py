"""Database related helpers."""

from __future__ import annotations

from .session import build_engine, enable_sqlite_foreign_keys, get_session, init_db

__all__ = ["build_engine", "enable_sqlite_foreign_keys", "get_session", "init_db"]
