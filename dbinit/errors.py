"""Initialization errors — everything raised out of the bootstrap step is an InitError."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from dbinit.resources import Resource


class InitError(Exception):
    """Base class for database initialization failures."""


class ResourceNotFound(InitError):
    """A listed SQL script could not be located."""

    def __init__(self, location: str):
        super().__init__(f"SQL script not found: {location}")
        self.location = location


class PopulationFailed(InitError):
    """The populate operation reported a failure (SQL error, lost or closed connection)."""


class ScriptParseError(PopulationFailed):
    """A script could not be split into statements."""

    def __init__(self, message: str, resource: Resource | None = None):
        where = f" in {resource.description}" if resource is not None else ""
        super().__init__(f"{message}{where}")
        self.reason = message
        self.resource = resource


class ScriptStatementFailed(PopulationFailed):
    """A single statement of a script failed to execute."""

    def __init__(self, resource: Resource, statement_number: int, statement: str):
        super().__init__(
            f"Failed to execute SQL script statement #{statement_number} of "
            f"{resource.description}: {statement}"
        )
        self.resource = resource
        self.statement_number = statement_number
        self.statement = statement


class ScriptReadError(PopulationFailed):
    """A script exists but could not be read or decoded."""

    def __init__(self, resource: Resource, reason: str):
        super().__init__(f"Cannot read SQL script from {resource.description}: {reason}")
        self.resource = resource
