"""Database connection management for the SQLite local vault.

Connections are created once per database file and reused for the lifetime of
the process.
"""

from __future__ import annotations

import atexit
import os
import sqlite3
from pathlib import Path

from platformdirs import user_data_dir

from studyplan_cli.adapters.sqlite.schema import ALL_TABLES, SCHEMA_VERSION
from studyplan_cli.utils.logger import get_logger

logger = get_logger("sqlite")

DEFAULT_DB_NAME = "studyplan.db"


def default_db_path() -> Path:
    """Location of the vault when the config does not name one."""
    return Path(user_data_dir("studyplan_cli")) / DEFAULT_DB_NAME


class DatabaseConnection:
    """Connection manager for local SQLite vaults.

    Provides:
    - One connection per database file (connection reuse)
    - WAL mode
    - Automatic directory creation
    - Owner-only file permissions
    - Cleanup on exit
    """

    _connections: dict[Path, sqlite3.Connection] = {}
    _cleanup_registered = False

    @classmethod
    def get_connection(cls, db_path: str | Path | None = None) -> sqlite3.Connection:
        """Get or create the connection for ``db_path``.

        Args:
            db_path: Path to database file. If None, uses default location.

        Returns:
            sqlite3.Connection with the schema in place
        """
        db_path = default_db_path() if db_path is None else Path(db_path)

        connection = cls._connections.get(db_path)
        if connection is not None:
            return connection

        db_path.parent.mkdir(parents=True, exist_ok=True)
        is_new_database = not db_path.exists()

        connection = sqlite3.connect(str(db_path), timeout=30.0)
        connection.row_factory = sqlite3.Row
        connection.execute("PRAGMA journal_mode = WAL")

        if is_new_database:
            os.chmod(db_path, 0o600)
            logger.info("created local vault at %s", db_path)

        cls._ensure_schema(connection)
        cls._connections[db_path] = connection

        if not cls._cleanup_registered:
            atexit.register(cls.close_all)
            cls._cleanup_registered = True

        return connection

    @classmethod
    def _ensure_schema(cls, connection: sqlite3.Connection) -> None:
        version = connection.execute("PRAGMA user_version").fetchone()[0]
        if version >= SCHEMA_VERSION:
            return
        with connection:
            for statement in ALL_TABLES:
                connection.execute(statement)
            connection.execute(f"PRAGMA user_version = {SCHEMA_VERSION}")

    @classmethod
    def close_connection(cls, db_path: str | Path) -> None:
        """Close the connection for one database file, if open."""
        connection = cls._connections.pop(Path(db_path), None)
        if connection is not None:
            connection.close()

    @classmethod
    def close_all(cls) -> None:
        """Close every open connection."""
        for path in list(cls._connections):
            try:
                cls.close_connection(path)
            except sqlite3.Error:
                logger.warning("failed to close vault %s", path)


def get_connection(db_path: str | Path | None = None) -> sqlite3.Connection:
    """Helper function to get a database connection."""
    return DatabaseConnection.get_connection(db_path)
