"""SQL script resources — bundled package data (``classpath:``) or files (``file:``)."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from importlib import resources
from importlib.resources.abc import Traversable
from pathlib import Path

from dbinit.errors import ResourceNotFound, ScriptReadError

logger = logging.getLogger(__name__)

CLASSPATH_PREFIX = "classpath:"
FILE_PREFIX = "file:"

DEFAULT_PACKAGE = "dbinit.sql"


@dataclass(frozen=True)
class Resource:
    """A named reference to a SQL script, resolved lazily."""

    location: str
    path: Traversable | Path | None = None

    @property
    def description(self) -> str:
        return f"resource [{self.location}]"

    def exists(self) -> bool:
        return self.path is not None and self.path.is_file()

    def read_text(self, encoding: str = "utf-8") -> str:
        if not self.exists():
            raise ResourceNotFound(self.location)
        try:
            return self.path.read_text(encoding=encoding)
        except (OSError, UnicodeDecodeError, LookupError) as exc:
            raise ScriptReadError(self, str(exc)) from exc


class ResourceLoader:
    """Resolve script locations against a package and a base directory.

    Bare names are treated like ``classpath:`` names.
    """

    def __init__(self, package: str = DEFAULT_PACKAGE, base_dir: Path | None = None):
        self.package = package
        self.base_dir = base_dir

    def get_resource(self, location: str) -> Resource:
        if location.startswith(FILE_PREFIX):
            path = Path(location[len(FILE_PREFIX) :])
            if not path.is_absolute():
                path = (self.base_dir or Path.cwd()) / path
            return Resource(location, path)

        name = location[len(CLASSPATH_PREFIX) :] if location.startswith(CLASSPATH_PREFIX) else location
        name = name.lstrip("/")
        try:
            root = resources.files(self.package)
        except ModuleNotFoundError:
            logger.warning("Resource package %s is not importable", self.package)
            return Resource(location)
        return Resource(location, root.joinpath(name))

    def get_resources(self, locations: list[str]) -> list[Resource]:
        return [self.get_resource(location) for location in locations]
