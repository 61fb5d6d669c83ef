"""Data service - routes planner CRUD to the local vault or the remote store.

Every operation takes ``use_remote``: True targets the signed-in user's remote
rows, False the local vault. The service only routes; it never merges the two
stores (that is the sync service's job).
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from studyplan_cli.models import (
    PlannerSettings,
    SchoolClass,
    SyllabusAttachment,
    Task,
    TaskType,
)
from studyplan_cli.models.exceptions import NotFoundError, StoreError
from studyplan_cli.models.storage_strategy import (
    LocalStorageStrategy,
    StorageStrategy,
    StorageStrategyContext,
)
from studyplan_cli.repositories import SETTINGS_KEY, EntityStore
from studyplan_cli.repositories.repository import EntityRepository
from studyplan_cli.services.events import CALENDAR_UPDATE, EventBus
from studyplan_cli.utils.logger import get_logger

logger = get_logger("data")


class DataService:
    """Data access layer used by the presentation layer."""

    def __init__(
        self,
        local: LocalStorageStrategy,
        remote: StorageStrategy | None,
        store: EntityStore,
        events: EventBus | None = None,
    ):
        """Initialize the data service.

        Args:
            local: Strategy over the local entity store
            remote: Strategy over the remote store, None when signed out
            store: Local entity store for raw key/value access
            events: Channel receiving ``calendar-update`` after task changes
        """
        self.local = StorageStrategyContext(local)
        self.remote = StorageStrategyContext(remote) if remote is not None else None
        self.store = store
        self.events = events or EventBus()

    def _context(self, use_remote: bool) -> StorageStrategyContext:
        if not use_remote:
            return self.local
        if self.remote is None:
            raise StoreError("The remote store requires a signed-in user")
        return self.remote

    # ------------------------------------------------------------------
    # Raw local persistence
    # ------------------------------------------------------------------

    def get_local_data(self, key: str, default: Any = None) -> Any:
        return self.store.get_local_data(key, default)

    def save_local_data(self, key: str, value: Any) -> None:
        self.store.save_local_data(key, value)

    def get_settings(self) -> PlannerSettings:
        return PlannerSettings.model_validate(self.get_local_data(SETTINGS_KEY, {}) or {})

    def update_settings(self, **changes: Any) -> PlannerSettings:
        settings = self.get_settings().model_copy(update=changes)
        self.save_local_data(SETTINGS_KEY, settings.model_dump())
        return settings

    # ------------------------------------------------------------------
    # Shared helpers
    # ------------------------------------------------------------------

    @staticmethod
    async def _add(repo: EntityRepository, entity):
        try:
            return await repo.add(entity)
        except StoreError as e:
            logger.error("failed to add %s: %s", entity.id, e)
            return None

    @staticmethod
    async def _update(repo: EntityRepository, entity_id: str, entity):
        try:
            return await repo.update(entity_id, entity)
        except NotFoundError:
            logger.warning("cannot update missing record %s", entity_id)
            return None
        except StoreError as e:
            logger.error("failed to update %s: %s", entity_id, e)
            return None

    def _notify(self, action: str, task_id: str) -> None:
        self.events.publish(CALENDAR_UPDATE, {"action": action, "id": task_id})

    # ------------------------------------------------------------------
    # Tasks
    # ------------------------------------------------------------------

    async def get_tasks(self, use_remote: bool) -> list[Task]:
        return await self._context(use_remote).task_repository.list_all()

    async def get_task(self, task_id: str, use_remote: bool) -> Task:
        return await self._context(use_remote).task_repository.get(task_id)

    async def add_task(self, task: Task, use_remote: bool) -> Task | None:
        added = await self._add(self._context(use_remote).task_repository, task)
        if added is not None:
            self._notify("add", added.id)
        return added

    async def update_task(self, task_id: str, task: Task, use_remote: bool) -> Task | None:
        updated = await self._update(
            self._context(use_remote).task_repository, task_id, task
        )
        if updated is not None:
            self._notify("update", task_id)
        return updated

    async def delete_task(self, task_id: str, use_remote: bool) -> None:
        await self._context(use_remote).task_repository.delete(task_id)
        self._notify("delete", task_id)

    # ------------------------------------------------------------------
    # Classes
    # ------------------------------------------------------------------

    async def get_classes(self, use_remote: bool) -> list[SchoolClass]:
        return await self._context(use_remote).class_repository.list_all()

    async def get_class(self, class_id: str, use_remote: bool) -> SchoolClass:
        return await self._context(use_remote).class_repository.get(class_id)

    async def add_class(self, school_class: SchoolClass, use_remote: bool) -> SchoolClass | None:
        return await self._add(self._context(use_remote).class_repository, school_class)

    async def update_class(
        self, class_id: str, school_class: SchoolClass, use_remote: bool
    ) -> SchoolClass | None:
        return await self._update(
            self._context(use_remote).class_repository, class_id, school_class
        )

    async def delete_class(self, class_id: str, use_remote: bool) -> None:
        await self._context(use_remote).class_repository.delete(class_id)

    async def attach_syllabus(
        self, class_id: str, path: str | Path, use_remote: bool
    ) -> SchoolClass | None:
        """Attach (or replace) the syllabus of a class from a file.

        Raises:
            NotFoundError: If the class does not exist
            ValueError: If the file type is not supported
        """
        school_class = await self.get_class(class_id, use_remote)
        attachment = SyllabusAttachment.from_file(path)
        updated = school_class.model_copy(update={"syllabus": attachment})
        return await self.update_class(class_id, updated, use_remote)

    async def remove_syllabus(self, class_id: str, use_remote: bool) -> SchoolClass | None:
        school_class = await self.get_class(class_id, use_remote)
        updated = school_class.model_copy(update={"syllabus": None})
        return await self.update_class(class_id, updated, use_remote)

    # ------------------------------------------------------------------
    # Task types
    # ------------------------------------------------------------------

    async def get_task_types(self, use_remote: bool) -> list[TaskType]:
        return await self._context(use_remote).task_type_repository.list_all()

    async def add_task_type(self, task_type: TaskType, use_remote: bool) -> TaskType | None:
        return await self._add(self._context(use_remote).task_type_repository, task_type)

    async def update_task_type(
        self, type_id: str, task_type: TaskType, use_remote: bool
    ) -> TaskType | None:
        return await self._update(
            self._context(use_remote).task_type_repository, type_id, task_type
        )

    async def delete_task_type(self, type_id: str, use_remote: bool) -> None:
        await self._context(use_remote).task_type_repository.delete(type_id)
