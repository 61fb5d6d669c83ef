"""Local adapters - Repository implementations over an EntityStore.

Each repository keeps its whole collection as a JSON list under one key of the
injected entity store, the same layout the web planner uses in browser
storage.
"""

from __future__ import annotations

from typing import Any, Generic

from studyplan_cli.models import SchoolClass, Task, TaskType
from studyplan_cli.models.exceptions import NotFoundError
from studyplan_cli.repositories import (
    CLASSES_KEY,
    TASK_TYPES_KEY,
    TASKS_KEY,
    ClassRepository,
    EntityStore,
    TaskRepository,
    TaskTypeRepository,
)
from studyplan_cli.repositories.repository import ModelT


class _LocalCollection(Generic[ModelT]):
    """Collection CRUD shared by the local repositories."""

    model: type[ModelT]
    key: str

    def __init__(self, store: EntityStore):
        self.store = store

    def _load(self) -> list[dict[str, Any]]:
        data = self.store.get_local_data(self.key, [])
        return data if isinstance(data, list) else []

    def _save(self, records: list[dict[str, Any]]) -> None:
        self.store.save_local_data(self.key, records)

    async def list_all(self) -> list[ModelT]:
        return [self.model.model_validate(record) for record in self._load()]

    async def get(self, entity_id: str) -> ModelT:
        for record in self._load():
            if record.get("id") == entity_id:
                return self.model.model_validate(record)
        raise NotFoundError(f"{self.model.__name__} '{entity_id}' not found")

    async def add(self, entity: ModelT) -> ModelT:
        records = self._load()
        records.append(entity.model_dump())
        self._save(records)
        return entity

    async def update(self, entity_id: str, entity: ModelT) -> ModelT:
        records = self._load()
        for index, record in enumerate(records):
            if record.get("id") == entity_id:
                updated = {**record, **entity.model_dump(), "id": entity_id}
                records[index] = updated
                self._save(records)
                return self.model.model_validate(updated)
        raise NotFoundError(f"{self.model.__name__} '{entity_id}' not found")

    async def delete(self, entity_id: str) -> bool:
        records = self._load()
        remaining = [record for record in records if record.get("id") != entity_id]
        if len(remaining) == len(records):
            return False
        self._save(remaining)
        return True


class LocalTaskRepository(_LocalCollection[Task], TaskRepository):
    """Tasks stored under ``calendar_tasks``."""

    model = Task
    key = TASKS_KEY


class LocalClassRepository(_LocalCollection[SchoolClass], ClassRepository):
    """Classes stored under ``calendar_classes``."""

    model = SchoolClass
    key = CLASSES_KEY


class LocalTaskTypeRepository(_LocalCollection[TaskType], TaskTypeRepository):
    """Task types stored under ``calendar_task_types``."""

    model = TaskType
    key = TASK_TYPES_KEY
