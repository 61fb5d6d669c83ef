"""
Strategy Pattern: Storage Strategy Container

A strategy bundles the repositories of one storage backend (the local vault or
the remote store). The data service holds one strategy per backend and routes
each call by the caller's ``use_remote`` flag; services never know which
backend they are talking to.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from studyplan_cli.repositories import (
    ClassRepository,
    EntityStore,
    TaskRepository,
    TaskTypeRepository,
)


class StorageStrategy(ABC):
    """
    Abstract base class for storage strategies.

    A strategy encapsulates ALL repository implementations for a given
    storage backend.
    """

    @abstractmethod
    def get_task_repository(self) -> TaskRepository:
        """Get task repository implementation for this strategy."""

    @abstractmethod
    def get_class_repository(self) -> ClassRepository:
        """Get class repository implementation for this strategy."""

    @abstractmethod
    def get_task_type_repository(self) -> TaskTypeRepository:
        """Get task type repository implementation for this strategy."""

    @property
    @abstractmethod
    def storage_type(self) -> str:
        """Get storage type identifier (for logging/debugging)."""


class LocalStorageStrategy(StorageStrategy):
    """
    Local storage strategy.

    All repositories keep their collections in the injected entity store.
    """

    def __init__(self, store: EntityStore):
        """
        Initialize local strategy.

        Args:
            store: Entity store backend (SQLite vault or in-memory)
        """
        from studyplan_cli.adapters.local import (
            LocalClassRepository,
            LocalTaskRepository,
            LocalTaskTypeRepository,
        )

        self.store = store
        self._task_repo = LocalTaskRepository(store)
        self._class_repo = LocalClassRepository(store)
        self._task_type_repo = LocalTaskTypeRepository(store)

    def get_task_repository(self) -> TaskRepository:
        return self._task_repo

    def get_class_repository(self) -> ClassRepository:
        return self._class_repo

    def get_task_type_repository(self) -> TaskTypeRepository:
        return self._task_type_repo

    @property
    def storage_type(self) -> str:
        return "local"


class RemoteStorageStrategy(StorageStrategy):
    """
    Remote storage strategy.

    All repositories use the remote store, scoped to one user.
    """

    def __init__(self, client, user_id: str):
        """
        Initialize remote strategy.

        Args:
            client: RemoteStoreClient used by every repository
            user_id: Owning user of every row read or written
        """
        from studyplan_cli.adapters.remote import (
            RemoteClassRepository,
            RemoteTaskRepository,
            RemoteTaskTypeRepository,
        )

        self.client = client
        self.user_id = user_id
        self._task_repo = RemoteTaskRepository(client, user_id)
        self._class_repo = RemoteClassRepository(client, user_id)
        self._task_type_repo = RemoteTaskTypeRepository(client, user_id)

    def get_task_repository(self) -> TaskRepository:
        return self._task_repo

    def get_class_repository(self) -> ClassRepository:
        return self._class_repo

    def get_task_type_repository(self) -> TaskTypeRepository:
        return self._task_type_repo

    @property
    def storage_type(self) -> str:
        return "remote"


class StorageStrategyContext:
    """
    Strategy context that provides access to all repositories of one backend.

    Usage:
        strategy = LocalStorageStrategy(SqliteEntityStore("/path/to/db"))
        context = StorageStrategyContext(strategy)
        await context.task_repository.list_all()
    """

    def __init__(self, strategy: StorageStrategy):
        self._strategy = strategy

    @property
    def task_repository(self) -> TaskRepository:
        """Get task repository from current strategy."""
        return self._strategy.get_task_repository()

    @property
    def class_repository(self) -> ClassRepository:
        """Get class repository from current strategy."""
        return self._strategy.get_class_repository()

    @property
    def task_type_repository(self) -> TaskTypeRepository:
        """Get task type repository from current strategy."""
        return self._strategy.get_task_type_repository()

    @property
    def storage_type(self) -> str:
        """Get storage type (for logging/debugging only)."""
        return self._strategy.storage_type

    @property
    def strategy(self) -> StorageStrategy:
        """Get underlying strategy."""
        return self._strategy
