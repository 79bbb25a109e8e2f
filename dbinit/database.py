"""Async engine setup — SQLite via aiosqlite by default, any SQLAlchemy async URL works."""

from __future__ import annotations

import logging
from pathlib import Path

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from dbinit.config import DatabaseConfig

logger = logging.getLogger(__name__)

EMBEDDED_BACKENDS = {"sqlite"}


def is_embedded(engine: AsyncEngine) -> bool:
    """Whether the engine points at an embedded (in-process) database."""
    return engine.url.get_backend_name() in EMBEDDED_BACKENDS


def create_engine(config: DatabaseConfig) -> AsyncEngine:
    """Create an async engine, making sure a SQLite file's directory exists."""
    url = make_url(config.url)
    if url.get_backend_name() == "sqlite" and url.database and url.database != ":memory:":
        Path(url.database).parent.mkdir(parents=True, exist_ok=True)

    engine = create_async_engine(url, echo=config.echo)

    if url.get_backend_name() == "sqlite":

        @event.listens_for(engine.sync_engine, "connect")
        def set_sqlite_pragma(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    logger.debug("Created async engine for %s", url.render_as_string(hide_password=True))
    return engine


# Module-level singleton
_engine: AsyncEngine | None = None


def get_engine() -> AsyncEngine:
    """Get the global engine instance."""
    if _engine is None:
        raise RuntimeError("Database engine not initialized. Call init_engine() first.")
    return _engine


def init_engine(config: DatabaseConfig) -> AsyncEngine:
    """Initialize the global engine instance."""
    global _engine
    _engine = create_engine(config)
    return _engine
