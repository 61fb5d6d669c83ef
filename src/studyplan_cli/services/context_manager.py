"""Bootstrap of the planner services.

Usage Pattern:
    from studyplan_cli.services.context_manager import get_planner_context

    ctx = get_planner_context()
    tasks = await ctx.data_service.get_tasks(ctx.use_remote)
    ok = await ctx.sync_service.synchronize(ctx.user_id)
"""

from __future__ import annotations

from functools import lru_cache

from studyplan_cli.adapters.sqlite import SqliteEntityStore
from studyplan_cli.models.storage_strategy import (
    LocalStorageStrategy,
    RemoteStorageStrategy,
)
from studyplan_cli.repositories import EntityStore
from studyplan_cli.services.api.client import RemoteStoreClient
from studyplan_cli.services.auth_service import AuthService
from studyplan_cli.services.config_service import get_config_service
from studyplan_cli.services.data_service import DataService
from studyplan_cli.services.events import EventBus
from studyplan_cli.services.sync_service import SyncService


class PlannerContext:
    """Everything a command needs to reach the planner's data."""

    def __init__(
        self,
        store: EntityStore,
        remote_client: RemoteStoreClient,
        user_id: str | None,
        events: EventBus | None = None,
    ):
        self.store = store
        self.remote_client = remote_client
        self.user_id = user_id
        self.events = events or EventBus()

        remote = RemoteStorageStrategy(remote_client, user_id) if user_id else None
        self.data_service = DataService(
            LocalStorageStrategy(store), remote, store, self.events
        )
        self.sync_service = SyncService(store, remote_client)

    @property
    def use_remote(self) -> bool:
        """Route data operations to the remote store when signed in."""
        return self.user_id is not None

    async def close(self) -> None:
        await self.remote_client.close()


@lru_cache(maxsize=1)
def get_planner_context() -> PlannerContext:
    """Build the planner context from the configuration and stored session."""
    config_svc = get_config_service()
    store = SqliteEntityStore(config_svc.db_path)
    client = RemoteStoreClient(config_svc.config.remote, AuthService.access_token())
    return PlannerContext(store, client, AuthService.current_user_id())
