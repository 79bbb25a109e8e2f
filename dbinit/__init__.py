"""Startup database initialization — bundled SQL scripts run against an async engine."""

from dbinit.bootstrap import DatabaseBootstrapper, initialize_database
from dbinit.errors import InitError, PopulationFailed, ResourceNotFound

__all__ = [
    "DatabaseBootstrapper",
    "initialize_database",
    "InitError",
    "PopulationFailed",
    "ResourceNotFound",
]
