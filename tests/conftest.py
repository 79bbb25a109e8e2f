"""Shared fixtures — a throwaway SQLite file per test and helpers to inspect it."""

from __future__ import annotations

import asyncio
import sqlite3
from pathlib import Path

import pytest

from dbinit.config import DatabaseConfig
from dbinit.database import create_engine


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "db" / "test.db"


@pytest.fixture
def db_url(db_path: Path) -> str:
    return f"sqlite+aiosqlite:///{db_path}"


@pytest.fixture
def engine(db_url: str):
    """Async engine on the temp file; pooled connections closed at teardown."""
    engine = create_engine(DatabaseConfig(url=db_url))
    yield engine
    asyncio.run(engine.dispose())


@pytest.fixture
def write_script(tmp_path: Path):
    """Write a SQL file under tmp_path/scripts and return its ``file:`` location."""
    scripts_dir = tmp_path / "scripts"
    scripts_dir.mkdir()

    def _write(name: str, sql: str) -> str:
        path = scripts_dir / name
        path.write_text(sql, encoding="utf-8")
        return f"file:{path}"

    return _write


@pytest.fixture
def query(db_path: Path):
    """Read the temp database back through the stdlib driver."""

    def _query(sql: str) -> list[tuple]:
        conn = sqlite3.connect(str(db_path))
        try:
            return conn.execute(sql).fetchall()
        finally:
            conn.close()

    return _query


@pytest.fixture
def table_names(query):
    """Names of the tables currently in the temp database."""

    def _table_names() -> set[str]:
        rows = query("SELECT name FROM sqlite_master WHERE type = 'table'")
        return {r[0] for r in rows}

    return _table_names
