"""Remote adapters - Repository implementations over the remote store.

Every row in the remote tables carries the owning ``user_id``; the
repositories scope all reads and writes to one user.
"""

from __future__ import annotations

import json
from datetime import UTC, datetime
from typing import Any, Generic

from studyplan_cli.models import SchoolClass, Task, TaskType
from studyplan_cli.models.exceptions import NotFoundError
from studyplan_cli.repositories import (
    ClassRepository,
    TaskRepository,
    TaskTypeRepository,
)
from studyplan_cli.repositories.repository import ModelT
from studyplan_cli.services.api.client import RemoteStoreClient
from studyplan_cli.utils.logger import get_logger

logger = get_logger("remote")

TASKS_TABLE = "tasks"
CLASSES_TABLE = "classes"
TASK_TYPES_TABLE = "task_types"


def class_to_row(data: dict[str, Any]) -> dict[str, Any]:
    """Convert a stored class record to a ``classes`` row.

    The remote table keeps the attachment as JSON text in ``syllabus_json``.
    """
    row = dict(data)
    syllabus = row.pop("syllabus", None)
    row["syllabus_json"] = json.dumps(syllabus) if syllabus else None
    return row


def row_to_class(row: dict[str, Any]) -> dict[str, Any]:
    """Convert a ``classes`` row back to the stored class record shape.

    Undecodable ``syllabus_json`` is dropped so one bad row cannot fail a pull.
    """
    data = dict(row)
    raw = data.pop("syllabus_json", None)
    if isinstance(raw, str) and raw:
        try:
            data["syllabus"] = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning("class %s: unreadable syllabus_json dropped: %s", data.get("id"), e)
            data["syllabus"] = None
    elif isinstance(raw, dict):
        data["syllabus"] = raw
    else:
        data.setdefault("syllabus", None)
    return data


class _RemoteTable(Generic[ModelT]):
    """User-scoped CRUD over one remote table."""

    model: type[ModelT]
    table: str

    def __init__(self, client: RemoteStoreClient, user_id: str):
        self.client = client
        self.user_id = user_id

    def to_row(self, entity: ModelT) -> dict[str, Any]:
        data = entity.model_dump()
        data["user_id"] = self.user_id
        data["created_at"] = data.get("created_at") or datetime.now(UTC).isoformat()
        return data

    def from_row(self, row: dict[str, Any]) -> ModelT:
        return self.model.model_validate(row)

    async def list_all(self) -> list[ModelT]:
        rows = await self.client.select(self.table, filters={"user_id": self.user_id})
        return [self.from_row(row) for row in rows]

    async def get(self, entity_id: str) -> ModelT:
        rows = await self.client.select(
            self.table, filters={"id": entity_id, "user_id": self.user_id}, limit=1
        )
        if not rows:
            raise NotFoundError(f"{self.model.__name__} '{entity_id}' not found")
        return self.from_row(rows[0])

    async def add(self, entity: ModelT) -> ModelT:
        rows = await self.client.upsert(self.table, [self.to_row(entity)])
        return self.from_row(rows[0]) if rows else entity

    async def update(self, entity_id: str, entity: ModelT) -> ModelT:
        values = self.to_row(entity)
        values["id"] = entity_id
        rows = await self.client.update(
            self.table, values, filters={"id": entity_id, "user_id": self.user_id}
        )
        if not rows:
            raise NotFoundError(f"{self.model.__name__} '{entity_id}' not found")
        return self.from_row(rows[0])

    async def delete(self, entity_id: str) -> bool:
        rows = await self.client.delete(
            self.table, filters={"id": entity_id, "user_id": self.user_id}
        )
        return bool(rows)


class RemoteTaskRepository(_RemoteTable[Task], TaskRepository):
    """Tasks in the remote ``tasks`` table."""

    model = Task
    table = TASKS_TABLE


class RemoteClassRepository(_RemoteTable[SchoolClass], ClassRepository):
    """Classes in the remote ``classes`` table."""

    model = SchoolClass
    table = CLASSES_TABLE

    def to_row(self, entity: SchoolClass) -> dict[str, Any]:
        return class_to_row(super().to_row(entity))

    def from_row(self, row: dict[str, Any]) -> SchoolClass:
        return SchoolClass.model_validate(row_to_class(row))


class RemoteTaskTypeRepository(_RemoteTable[TaskType], TaskTypeRepository):
    """Task types in the remote ``task_types`` table."""

    model = TaskType
    table = TASK_TYPES_TABLE
