"""Sync state manager for the last-sync marker.

The marker is kept in the local entity store under ``last_sync_timestamp``.
It is advisory: nothing uses it to decide the sync direction.
"""

from __future__ import annotations

from datetime import UTC, datetime

from studyplan_cli.repositories import LAST_SYNC_KEY, EntityStore


class SyncState:
    """Reads and writes the last successful sync time."""

    def __init__(self, store: EntityStore):
        """Initialize sync state manager.

        Args:
            store: Local entity store holding the marker
        """
        self.store = store

    def get_last_sync(self) -> datetime | None:
        """Get last sync timestamp.

        Returns:
            Last sync datetime (aware, UTC) or None if never synced
        """
        timestamp_str = self.store.get_local_data(LAST_SYNC_KEY)
        if not timestamp_str:
            return None

        dt = datetime.fromisoformat(str(timestamp_str).replace("Z", "+00:00"))
        if dt.tzinfo is None:
            return dt.replace(tzinfo=UTC)
        return dt

    def set_last_sync(self, timestamp: datetime | None = None) -> None:
        """Set last sync timestamp.

        Args:
            timestamp: Sync timestamp. Defaults to current time.
        """
        if timestamp is None:
            timestamp = datetime.now(UTC)
        if timestamp.tzinfo is None:
            timestamp = timestamp.replace(tzinfo=UTC)

        # Stored the way JavaScript's toISOString() writes it
        stored = timestamp.astimezone(UTC).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"
        self.store.save_local_data(LAST_SYNC_KEY, stored)

    def clear_last_sync(self) -> None:
        """Forget the last sync time."""
        self.store.delete_local_data(LAST_SYNC_KEY)
