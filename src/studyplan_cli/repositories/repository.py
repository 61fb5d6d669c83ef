"""Repository abstraction layer for StudyPlan CLI.

This module defines the abstract base classes (interfaces) for storage,
following the hexagonal architecture (Ports & Adapters) pattern.

Two layers exist:

* ``EntityStore`` is the raw local persistence primitive: JSON-serializable
  values addressed by string keys.
* Entity repositories (``TaskRepository``, ``ClassRepository``,
  ``TaskTypeRepository``) provide CRUD over one kind of record, either kept in
  an ``EntityStore`` or in the remote store.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Generic, TypeVar

from studyplan_cli.models import SchoolClass, Task, TaskType

# Keys of the collections kept in the local entity store.
TASKS_KEY = "calendar_tasks"
CLASSES_KEY = "calendar_classes"
TASK_TYPES_KEY = "calendar_task_types"
LAST_SYNC_KEY = "last_sync_timestamp"
SETTINGS_KEY = "calendar_settings"

ModelT = TypeVar("ModelT", Task, SchoolClass, TaskType)


class EntityStore(ABC):
    """Abstract key-value store holding serialized collections.

    Pure CRUD: no merge or de-duplication happens at this level.
    """

    @abstractmethod
    def get_local_data(self, key: str, default: Any = None) -> Any:
        """Return the deserialized value stored under ``key``.

        Args:
            key: Storage key (see the ``*_KEY`` constants)
            default: Value returned when nothing is stored under ``key``

        Raises:
            LocalStoreError: If the store cannot be read or the value is corrupt
        """
        raise NotImplementedError(
            "EntityStore.get_local_data() must be implemented by adapter"
        )

    @abstractmethod
    def save_local_data(self, key: str, value: Any) -> None:
        """Serialize ``value`` and store it under ``key``, replacing any previous value.

        Raises:
            LocalStoreError: If the store cannot be written
        """
        raise NotImplementedError(
            "EntityStore.save_local_data() must be implemented by adapter"
        )

    @abstractmethod
    def delete_local_data(self, key: str) -> None:
        """Remove ``key`` from the store. Missing keys are ignored."""
        raise NotImplementedError(
            "EntityStore.delete_local_data() must be implemented by adapter"
        )


class EntityRepository(ABC, Generic[ModelT]):
    """CRUD contract shared by all planner entity repositories."""

    @abstractmethod
    async def list_all(self) -> list[ModelT]:
        """List every record visible to this repository."""
        raise NotImplementedError("list_all() must be implemented by adapter")

    @abstractmethod
    async def get(self, entity_id: str) -> ModelT:
        """Get a record by id.

        Raises:
            NotFoundError: If no record has this id
        """
        raise NotImplementedError("get() must be implemented by adapter")

    @abstractmethod
    async def add(self, entity: ModelT) -> ModelT:
        """Store a new record and return it as stored."""
        raise NotImplementedError("add() must be implemented by adapter")

    @abstractmethod
    async def update(self, entity_id: str, entity: ModelT) -> ModelT:
        """Replace the record with id ``entity_id``.

        Raises:
            NotFoundError: If no record has this id
        """
        raise NotImplementedError("update() must be implemented by adapter")

    @abstractmethod
    async def delete(self, entity_id: str) -> bool:
        """Delete a record. Returns False if it did not exist."""
        raise NotImplementedError("delete() must be implemented by adapter")


class TaskRepository(EntityRepository[Task]):
    """Repository for calendar tasks."""


class ClassRepository(EntityRepository[SchoolClass]):
    """Repository for classes (sidebar entries)."""


class TaskTypeRepository(EntityRepository[TaskType]):
    """Repository for task types."""
