"""Tests for the local repositories and the in-memory entity store."""

import pytest

from studyplan_cli.adapters.local import (
    LocalClassRepository,
    LocalTaskRepository,
    LocalTaskTypeRepository,
)
from studyplan_cli.adapters.memory import MemoryEntityStore
from studyplan_cli.models import SchoolClass, Task
from studyplan_cli.models.exceptions import LocalStoreError, NotFoundError
from studyplan_cli.repositories import CLASSES_KEY, TASK_TYPES_KEY, TASKS_KEY


class TestMemoryEntityStore:
    def test_returns_copies(self):
        store = MemoryEntityStore({"calendar_tasks": [{"id": "a"}]})
        data = store.get_local_data("calendar_tasks")
        data.append({"id": "b"})
        assert store.get_local_data("calendar_tasks") == [{"id": "a"}]

    def test_default_and_delete(self):
        store = MemoryEntityStore()
        assert store.get_local_data("x", 5) == 5
        store.save_local_data("x", 1)
        store.delete_local_data("x")
        assert store.get_local_data("x") is None

    def test_rejects_unserializable(self):
        with pytest.raises(LocalStoreError):
            MemoryEntityStore().save_local_data("x", {1, 2})


@pytest.mark.asyncio
async def test_add_and_list_tasks(memory_store):
    repo = LocalTaskRepository(memory_store)
    await repo.add(Task(id="t1", title="Essay", due_date="2024-03-15"))
    await repo.add(Task(id="t2", title="Lab"))

    tasks = await repo.list_all()
    assert [t.id for t in tasks] == ["t1", "t2"]
    assert memory_store.get_local_data(TASKS_KEY)[0]["dueDate"] == "2024-03-15"


@pytest.mark.asyncio
async def test_get_missing_raises(memory_store):
    with pytest.raises(NotFoundError):
        await LocalTaskRepository(memory_store).get("nope")


@pytest.mark.asyncio
async def test_update_merges_and_keeps_id(memory_store):
    memory_store.save_local_data(
        TASKS_KEY, [{"id": "t1", "title": "Old", "color": "blue"}]
    )
    repo = LocalTaskRepository(memory_store)

    updated = await repo.update("t1", Task(id="other", title="New"))

    assert updated.id == "t1"
    assert updated.title == "New"
    stored = memory_store.get_local_data(TASKS_KEY)
    assert stored[0]["color"] == "blue"
    assert stored[0]["id"] == "t1"


@pytest.mark.asyncio
async def test_update_missing_raises(memory_store):
    with pytest.raises(NotFoundError):
        await LocalTaskRepository(memory_store).update("nope", Task(id="nope"))


@pytest.mark.asyncio
async def test_delete(memory_store):
    repo = LocalClassRepository(memory_store)
    await repo.add(SchoolClass(id="c1", name="CS 175"))

    assert await repo.delete("c1") is True
    assert await repo.delete("c1") is False
    assert memory_store.get_local_data(CLASSES_KEY) == []


@pytest.mark.asyncio
async def test_non_list_collection_reads_as_empty(memory_store):
    memory_store.save_local_data(TASK_TYPES_KEY, {"oops": True})
    assert await LocalTaskTypeRepository(memory_store).list_all() == []

