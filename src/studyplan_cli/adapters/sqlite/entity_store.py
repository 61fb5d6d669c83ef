"""SQLite implementation of EntityStore."""

from __future__ import annotations

import json
import sqlite3
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from studyplan_cli.adapters.sqlite.connection import get_connection
from studyplan_cli.models.exceptions import LocalStoreError
from studyplan_cli.repositories import EntityStore


class SqliteEntityStore(EntityStore):
    """Entity store persisted in the local SQLite vault."""

    def __init__(self, db_path: str | Path | None = None):
        """Initialize the store.

        Args:
            db_path: Optional database file path. If None, uses default location.
        """
        self.db_path = db_path
        self._connection: sqlite3.Connection | None = None

    @property
    def connection(self) -> sqlite3.Connection:
        """Get or create database connection."""
        if self._connection is None:
            self._connection = get_connection(self.db_path)
        return self._connection

    def get_local_data(self, key: str, default: Any = None) -> Any:
        try:
            row = self.connection.execute(
                "SELECT value FROM entities WHERE key = ?", (key,)
            ).fetchone()
        except sqlite3.Error as e:
            raise LocalStoreError(f"Failed to read '{key}': {e}") from e

        if row is None:
            return default
        try:
            return json.loads(row["value"])
        except json.JSONDecodeError as e:
            raise LocalStoreError(f"Corrupt value stored under '{key}'") from e

    def save_local_data(self, key: str, value: Any) -> None:
        try:
            payload = json.dumps(value)
        except (TypeError, ValueError) as e:
            raise LocalStoreError(f"Value for '{key}' is not serializable: {e}") from e

        try:
            with self.connection:
                self.connection.execute(
                    """
                    INSERT INTO entities (key, value, updated_at) VALUES (?, ?, ?)
                    ON CONFLICT(key) DO UPDATE SET
                        value = excluded.value,
                        updated_at = excluded.updated_at
                    """,
                    (key, payload, datetime.now(UTC).isoformat()),
                )
        except sqlite3.Error as e:
            raise LocalStoreError(f"Failed to write '{key}': {e}") from e

    def delete_local_data(self, key: str) -> None:
        try:
            with self.connection:
                self.connection.execute("DELETE FROM entities WHERE key = ?", (key,))
        except sqlite3.Error as e:
            raise LocalStoreError(f"Failed to delete '{key}': {e}") from e

    def keys(self) -> list[str]:
        """List stored keys (for diagnostics)."""
        rows = self.connection.execute("SELECT key FROM entities ORDER BY key")
        return [row["key"] for row in rows]
