"""Sync service for one-shot reconciliation of the local vault and the remote store.

On login the service checks whether the remote store already holds any task
for the user:

* none: PUSH, the local collections seed the remote tables;
* some: PULL, the remote collections overwrite the local ones.

After the first successful push the remote store has rows, so every later
sync pulls. Local data is therefore uploaded once per user and the remote
store is the source of truth from then on.

Remote requests issued here are never retried: a failed request fails the
sync and the user runs it again.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Literal

from studyplan_cli.adapters.remote import (
    CLASSES_TABLE,
    TASK_TYPES_TABLE,
    TASKS_TABLE,
    class_to_row,
    row_to_class,
)
from studyplan_cli.models.storage_strategy import LocalStorageStrategy
from studyplan_cli.repositories import (
    CLASSES_KEY,
    TASK_TYPES_KEY,
    TASKS_KEY,
    EntityStore,
)
from studyplan_cli.services.api.client import RemoteStoreClient
from studyplan_cli.services.sync_state import SyncState
from studyplan_cli.utils.logger import get_logger

logger = get_logger("sync")

Direction = Literal["push", "pull"]


class SyncResult:
    """Result of a sync operation."""

    def __init__(self):
        """Initialize sync result."""
        self.direction: Direction | None = None

        self.classes = 0
        self.task_types = 0
        self.tasks = 0
        self.duplicates_dropped = 0

        self.success = False
        self.error: str | None = None
        self.duration: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "direction": self.direction,
            "classes": self.classes,
            "task_types": self.task_types,
            "tasks": self.tasks,
            "duplicates_dropped": self.duplicates_dropped,
            "error": self.error,
            "duration": round(self.duration, 3),
        }


def dedupe_by_id(rows: list[dict[str, Any]]) -> tuple[list[dict[str, Any]], int]:
    """Drop rows whose id was already seen, keeping the first occurrence.

    Returns:
        Tuple of (unique rows in input order, number of rows dropped)
    """
    seen: set[Any] = set()
    unique = []
    for row in rows:
        row_id = row.get("id")
        if row_id in seen:
            continue
        seen.add(row_id)
        unique.append(row)
    return unique, len(rows) - len(unique)


class SyncService:
    """Reconciles the local entity store with the remote store."""

    def __init__(
        self,
        local_store: EntityStore,
        remote_client: RemoteStoreClient,
        sync_state: SyncState | None = None,
    ):
        """Initialize sync service.

        Args:
            local_store: Local entity store (always used for local reads,
                regardless of the authentication state)
            remote_client: Client of the remote store
            sync_state: Optional sync marker manager. Defaults to one backed
                by ``local_store``.
        """
        self.local_store = local_store
        self.local = LocalStorageStrategy(local_store)
        self.remote_client = remote_client
        self.sync_state = sync_state or SyncState(local_store)

    async def synchronize(self, user_id: str | None) -> bool:
        """Reconcile the stores for ``user_id``.

        Returns:
            True on success. Any store failure is logged and reported as False.
        """
        result = await self.run(user_id)
        return result.success

    async def run(self, user_id: str | None) -> SyncResult:
        """Reconcile the stores for ``user_id`` and report what happened."""
        result = SyncResult()
        if not user_id:
            result.error = "No authenticated user"
            return result

        start_time = datetime.now()
        try:
            if await self.check_if_data_exists(user_id):
                result.direction = "pull"
                await self._pull(user_id, result)
            else:
                result.direction = "push"
                await self._push(user_id, result)
            result.success = True
        except Exception as e:
            result.success = False
            result.error = f"{type(e).__name__}: {e}"
            logger.error(
                "sync %s for user %s failed: %s",
                result.direction or "check",
                user_id,
                result.error,
            )
        result.duration = (datetime.now() - start_time).total_seconds()

        if result.success:
            self._record_sync_time()
            logger.info(
                "sync %s for user %s: %d classes, %d task types, %d tasks (%.3fs)",
                result.direction,
                user_id,
                result.classes,
                result.task_types,
                result.tasks,
                result.duration,
            )
        return result

    async def check_if_data_exists(self, user_id: str) -> bool:
        """Whether the remote store holds at least one task row for ``user_id``.

        Raises:
            RemoteStoreError: If the query fails
        """
        rows = await self.remote_client.select(
            TASKS_TABLE, filters={"user_id": user_id}, columns="id", limit=1, retry=0
        )
        return len(rows) > 0

    async def _push(self, user_id: str, result: SyncResult) -> None:
        """Upload every local record, stamped with ``user_id``.

        Classes and task types go first because tasks reference them by id.
        """
        tasks = await self.local.get_task_repository().list_all()
        classes = await self.local.get_class_repository().list_all()
        task_types = await self.local.get_task_type_repository().list_all()

        now = datetime.now(UTC).isoformat()
        class_rows = [class_to_row(c.stamped(user_id, now)) for c in classes]
        type_rows = [t.stamped(user_id, now) for t in task_types]
        task_rows = [t.stamped(user_id, now) for t in tasks]

        if class_rows:
            await self.remote_client.upsert(CLASSES_TABLE, class_rows, retry=0)
            result.classes = len(class_rows)

        if type_rows:
            await self.remote_client.upsert(TASK_TYPES_TABLE, type_rows, retry=0)
            result.task_types = len(type_rows)

        if task_rows:
            await self.remote_client.upsert(TASKS_TABLE, task_rows, retry=0)
            result.tasks = len(task_rows)

    async def _pull(self, user_id: str, result: SyncResult) -> None:
        """Overwrite the local collections with the user's remote rows.

        An empty remote collection empties the local one. Nothing is written
        locally unless all three reads succeed.
        """
        select = self.remote_client.select
        filters = {"user_id": user_id}
        task_rows = await select(TASKS_TABLE, filters=filters, retry=0)
        class_rows = await select(CLASSES_TABLE, filters=filters, retry=0)
        type_rows = await select(TASK_TYPES_TABLE, filters=filters, retry=0)

        task_rows, dropped_tasks = dedupe_by_id(task_rows)
        class_rows, dropped_classes = dedupe_by_id(class_rows)
        type_rows, dropped_types = dedupe_by_id(type_rows)
        result.duplicates_dropped = dropped_tasks + dropped_classes + dropped_types
        if result.duplicates_dropped:
            logger.warning(
                "dropped %d remote rows with duplicate ids", result.duplicates_dropped
            )

        self.local_store.save_local_data(
            CLASSES_KEY, [row_to_class(row) for row in class_rows]
        )
        self.local_store.save_local_data(TASK_TYPES_KEY, type_rows)
        self.local_store.save_local_data(TASKS_KEY, task_rows)

        result.classes = len(class_rows)
        result.task_types = len(type_rows)
        result.tasks = len(task_rows)

    def _record_sync_time(self) -> None:
        try:
            self.sync_state.set_last_sync()
        except Exception as e:
            logger.warning("could not record sync time: %s", e)
