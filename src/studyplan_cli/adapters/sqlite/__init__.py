"""SQLite adapter module - Local vault storage implementation."""

from studyplan_cli.adapters.sqlite.connection import (
    DatabaseConnection,
    default_db_path,
    get_connection,
)
from studyplan_cli.adapters.sqlite.entity_store import SqliteEntityStore

__all__ = [
    "DatabaseConnection",
    "SqliteEntityStore",
    "default_db_path",
    "get_connection",
]
