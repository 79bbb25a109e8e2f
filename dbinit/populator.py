"""Populate a database from SQL script resources over an async SQLAlchemy handle."""

from __future__ import annotations

import logging
import time

from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine

from dbinit.errors import InitError, PopulationFailed, ScriptParseError, ScriptStatementFailed
from dbinit.resources import Resource
from dbinit.scripts import (
    DEFAULT_BLOCK_COMMENT_END,
    DEFAULT_BLOCK_COMMENT_START,
    DEFAULT_COMMENT_PREFIXES,
    DEFAULT_STATEMENT_SEPARATOR,
    FALLBACK_STATEMENT_SEPARATOR,
    contains_statement_separator,
    split_sql_script,
)

logger = logging.getLogger(__name__)


class ResourceDatabasePopulator:
    """Run an ordered list of SQL scripts against an engine or connection.

    Statements are committed one at a time, so a failure part-way through a
    script leaves the statements before it applied.
    """

    def __init__(
        self,
        *scripts: Resource,
        continue_on_error: bool = False,
        ignore_failed_drops: bool = False,
        separator: str = DEFAULT_STATEMENT_SEPARATOR,
        comment_prefixes: tuple[str, ...] = DEFAULT_COMMENT_PREFIXES,
        block_comment_start: str = DEFAULT_BLOCK_COMMENT_START,
        block_comment_end: str = DEFAULT_BLOCK_COMMENT_END,
        encoding: str = "utf-8",
    ):
        self.scripts: list[Resource] = list(scripts)
        self.continue_on_error = continue_on_error
        self.ignore_failed_drops = ignore_failed_drops
        self.separator = separator
        self.comment_prefixes = comment_prefixes
        self.block_comment_start = block_comment_start
        self.block_comment_end = block_comment_end
        self.encoding = encoding

    def add_script(self, script: Resource) -> None:
        self.scripts.append(script)

    def add_scripts(self, *scripts: Resource) -> None:
        self.scripts.extend(scripts)

    def set_scripts(self, *scripts: Resource) -> None:
        self.scripts = list(scripts)

    async def populate(self, handle: AsyncEngine | AsyncConnection) -> None:
        """Execute every script in order; raise PopulationFailed on the first failure."""
        try:
            if isinstance(handle, AsyncEngine):
                async with handle.connect() as conn:
                    await self._run_scripts(conn)
            else:
                if handle.closed:
                    raise PopulationFailed("Cannot populate database: connection is closed")
                await self._run_scripts(handle)
        except InitError:
            raise
        except (SQLAlchemyError, OSError) as exc:
            raise PopulationFailed(f"Failed to populate database: {exc}") from exc

    async def _run_scripts(self, conn: AsyncConnection) -> None:
        for script in self.scripts:
            await self._execute_script(conn, script)

    def _split(self, resource: Resource) -> list[str]:
        script = resource.read_text(self.encoding)
        options = (self.comment_prefixes, self.block_comment_start, self.block_comment_end)
        try:
            separator = self.separator
            if not contains_statement_separator(script, separator, *options):
                separator = FALLBACK_STATEMENT_SEPARATOR
            return split_sql_script(script, separator, *options)
        except ScriptParseError as exc:
            raise ScriptParseError(exc.reason, resource) from exc

    async def _execute_script(self, conn: AsyncConnection, resource: Resource) -> None:
        logger.info("Executing SQL script from %s", resource.description)
        started = time.monotonic()
        statements = self._split(resource)

        for number, statement in enumerate(statements, start=1):
            try:
                await conn.exec_driver_sql(statement)
                await conn.commit()
            except DBAPIError as exc:
                await conn.rollback()
                is_drop = statement.lower().startswith("drop")
                if self.continue_on_error or (is_drop and self.ignore_failed_drops):
                    logger.debug(
                        "Failed to execute SQL script statement #%d of %s: %s (ignored): %s",
                        number,
                        resource.description,
                        statement,
                        exc,
                    )
                    continue
                raise ScriptStatementFailed(resource, number, statement) from exc

        logger.info(
            "Executed SQL script from %s in %d ms (%d statements)",
            resource.description,
            (time.monotonic() - started) * 1000,
            len(statements),
        )
