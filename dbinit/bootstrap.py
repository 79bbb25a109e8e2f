"""Startup database initialization.

``DatabaseBootstrapper.initialize`` is the one blocking boundary of the package:
it resolves the configured SQL scripts (``schema.sql`` then ``data.sql`` by
default), hands them to ``ResourceDatabasePopulator`` and waits for the async
populate operation to finish before returning. There is no timeout and no
retry; any failure is raised to the caller as an ``InitError`` so that
application startup aborts.
"""

from __future__ import annotations

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Awaitable, Callable, TypeVar

from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine

from dbinit.config import AppConfig, InitConfig, InitMode
from dbinit.database import is_embedded
from dbinit.errors import ResourceNotFound
from dbinit.populator import ResourceDatabasePopulator
from dbinit.resources import Resource, ResourceLoader

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_SCRIPTS = ("classpath:schema.sql", "classpath:data.sql")


def block_on(factory: Callable[[], Awaitable[T]]) -> T:
    """Run the awaitable produced by ``factory`` to completion and return its result.

    Without a running event loop this is ``asyncio.run``. Inside a running loop
    the awaitable runs on a private loop in a worker thread while the calling
    thread (and its loop) waits.
    """

    async def _main() -> T:
        return await factory()

    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(_main())

    with ThreadPoolExecutor(max_workers=1, thread_name_prefix="db-init") as pool:
        return pool.submit(asyncio.run, _main()).result()


class DatabaseBootstrapper:
    """Runs the bundled SQL scripts against a caller-supplied async handle."""

    def __init__(
        self,
        loader: ResourceLoader | None = None,
        locations: tuple[str, ...] | list[str] = DEFAULT_SCRIPTS,
        **populator_options: Any,
    ):
        self.loader = loader or ResourceLoader()
        self.locations = tuple(locations)
        self.populator_options = populator_options

    @classmethod
    def from_config(cls, config: InitConfig) -> DatabaseBootstrapper:
        return cls(
            ResourceLoader(config.resource_package),
            config.locations,
            continue_on_error=config.continue_on_error,
            ignore_failed_drops=config.ignore_failed_drops,
            separator=config.separator,
            encoding=config.encoding,
        )

    def resolve_scripts(self) -> list[Resource]:
        """Resolve every location in order; the first missing one raises ResourceNotFound."""
        scripts = self.loader.get_resources(list(self.locations))
        for script in scripts:
            if not script.exists():
                raise ResourceNotFound(script.location)
        return scripts

    def build_populator(self) -> ResourceDatabasePopulator:
        return ResourceDatabasePopulator(*self.resolve_scripts(), **self.populator_options)

    async def populate(self, connection: AsyncEngine | AsyncConnection) -> None:
        await self.build_populator().populate(connection)

    def initialize(self, connection: AsyncEngine | AsyncConnection) -> None:
        """Populate the database and block until it is done."""
        populator = self.build_populator()
        block_on(lambda: populator.populate(connection))
        logger.info("Database initialized from %d script(s)", len(populator.scripts))


def initialize_database(engine: AsyncEngine, config: AppConfig) -> bool:
    """Startup hook: run the init scripts if ``init.mode`` allows it.

    Returns True when the scripts ran.
    """
    mode = config.init.mode
    if mode == InitMode.NEVER:
        logger.info("Database initialization disabled (mode=never)")
        return False
    if mode == InitMode.EMBEDDED and not is_embedded(engine):
        logger.info(
            "Skipping database initialization for non-embedded %s database (mode=embedded)",
            engine.dialect.name,
        )
        return False

    DatabaseBootstrapper.from_config(config.init).initialize(engine)
    return True
