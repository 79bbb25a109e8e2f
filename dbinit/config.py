"""Application configuration — env vars, YAML files, defaults."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings


def _repo_root() -> Path:
    """Find the repository root (directory containing pyproject.toml)."""
    current = Path(__file__).resolve().parent.parent
    if (current / "pyproject.toml").exists():
        return current
    return Path.cwd()


REPO_ROOT = _repo_root()


class InitMode(str, Enum):
    ALWAYS = "always"
    EMBEDDED = "embedded"
    NEVER = "never"


class DatabaseConfig(BaseSettings):
    url: str = f"sqlite+aiosqlite:///{REPO_ROOT / 'data' / 'app.db'}"
    echo: bool = False

    model_config = {"env_prefix": "DBI_DB_"}


class InitConfig(BaseSettings):
    """When and how the bundled SQL scripts run at startup."""

    mode: InitMode = InitMode.EMBEDDED
    locations: list[str] = Field(
        default_factory=lambda: ["classpath:schema.sql", "classpath:data.sql"]
    )
    resource_package: str = "dbinit.sql"
    continue_on_error: bool = False
    ignore_failed_drops: bool = False
    separator: str = Field(";", min_length=1)
    encoding: str = "utf-8"

    model_config = {"env_prefix": "DBI_INIT_"}


class ServerConfig(BaseSettings):
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "info"

    model_config = {"env_prefix": "DBI_SERVER_"}


class AppConfig(BaseSettings):
    """Top-level application configuration."""

    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    init: InitConfig = Field(default_factory=InitConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)

    # Environment & Sentry
    environment: str = "development"
    sentry_dsn: str = ""

    model_config = {"env_prefix": "DBI_"}

    @classmethod
    def from_yaml(cls, path: Path | None = None) -> AppConfig:
        """Load config from YAML file, with env var overrides."""
        if path is None:
            path = REPO_ROOT / "config" / "app.yml"

        values: dict[str, Any] = {}
        if path.exists():
            with open(path) as f:
                values = yaml.safe_load(f) or {}

        return cls(**values)
