"""In-memory EntityStore.

Values are kept as JSON text so callers get the same copy semantics as with the
SQLite vault: mutating a returned value never changes what is stored.
"""

from __future__ import annotations

import json
from typing import Any

from studyplan_cli.models.exceptions import LocalStoreError
from studyplan_cli.repositories import EntityStore


class MemoryEntityStore(EntityStore):
    """Entity store living only for the lifetime of the process."""

    def __init__(self, initial: dict[str, Any] | None = None):
        self._data: dict[str, str] = {}
        for key, value in (initial or {}).items():
            self.save_local_data(key, value)

    def get_local_data(self, key: str, default: Any = None) -> Any:
        if key not in self._data:
            return default
        return json.loads(self._data[key])

    def save_local_data(self, key: str, value: Any) -> None:
        try:
            self._data[key] = json.dumps(value)
        except (TypeError, ValueError) as e:
            raise LocalStoreError(f"Value for '{key}' is not serializable: {e}") from e

    def delete_local_data(self, key: str) -> None:
        self._data.pop(key, None)
