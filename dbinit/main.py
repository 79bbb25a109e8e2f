"""FastAPI application entry point — the database is initialized before serving."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import sentry_sdk
from fastapi import FastAPI

from dbinit.api.customers import router as customers_router
from dbinit.bootstrap import initialize_database
from dbinit.config import AppConfig
from dbinit.database import init_engine

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup/shutdown lifecycle."""
    yield

    await app.state.engine.dispose()
    logger.info("Application shutdown complete")


def _init_sentry(dsn: str, environment: str) -> None:
    """Initialize Sentry SDK if a DSN is configured and not in development."""
    if not dsn or environment == "development":
        return
    sentry_sdk.init(
        dsn,
        environment=environment,
        traces_sample_rate=0,
        send_client_reports=False,
        auto_session_tracking=False,
    )


def create_app(config: AppConfig | None = None) -> FastAPI:
    """Create the FastAPI application, running the init scripts first.

    An ``InitError`` from the scripts propagates and aborts startup.
    """
    if config is None:
        config = AppConfig.from_yaml()

    _init_sentry(config.sentry_dsn, config.environment)

    # Configure logging
    logging.basicConfig(
        level=getattr(logging, config.server.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(
        title="dbinit",
        version="0.1.0",
        description="Database initialized from bundled SQL scripts on startup",
        lifespan=lifespan,
        debug=config.environment == "development",
    )

    # Initialize database
    engine = init_engine(config.database)
    initialize_database(engine, config)
    app.state.config = config
    app.state.engine = engine

    app.include_router(customers_router)

    return app


def cli_entry() -> None:
    """CLI entry point for running the server."""
    import uvicorn

    config = AppConfig.from_yaml()
    app = create_app(config)

    uvicorn.run(
        app,
        host=config.server.host,
        port=config.server.port,
        log_level=config.server.log_level,
    )
