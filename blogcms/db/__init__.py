"""Database connection cache and session management."""

from blogcms.db.connection import (
    ConnectionCache,
    ConnectionHandle,
    ReadinessState,
    connect,
    engine_options,
)
from blogcms.db.database import Database

__all__ = [
    "ConnectionCache",
    "ConnectionHandle",
    "Database",
    "ReadinessState",
    "connect",
    "engine_options",
]
