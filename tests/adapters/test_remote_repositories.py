"""Tests for the remote repositories against the fake remote store."""

import json

import pytest

from studyplan_cli.adapters.remote import (
    RemoteClassRepository,
    RemoteTaskRepository,
    RemoteTaskTypeRepository,
    class_to_row,
    row_to_class,
)
from studyplan_cli.models import SchoolClass, SyllabusAttachment, Task, TaskType
from studyplan_cli.models.exceptions import NotFoundError


def test_class_row_conversion_round_trip():
    syllabus = {"name": "a.pdf", "type": "application/pdf", "size": 3, "data": "data:..."}
    row = class_to_row({"id": "c1", "name": "CS 175", "syllabus": syllabus})

    assert "syllabus" not in row
    assert json.loads(row["syllabus_json"]) == syllabus
    assert row_to_class(row)["syllabus"] == syllabus


def test_class_without_syllabus():
    row = class_to_row({"id": "c1", "name": "CS 175", "syllabus": None})
    assert row["syllabus_json"] is None
    assert row_to_class(row)["syllabus"] is None


@pytest.mark.asyncio
async def test_add_stamps_owner(remote, remote_client):
    repo = RemoteTaskRepository(remote_client, "user-1")
    await repo.add(Task(id="t1", title="Essay", due_date="2024-03-15"))

    row = remote.tables["tasks"][0]
    assert row["user_id"] == "user-1"
    assert row["dueDate"] == "2024-03-15"
    assert row["created_at"]


@pytest.mark.asyncio
async def test_list_is_scoped_to_user(remote, remote_client):
    remote.tables["task_types"] = [
        {"id": "hw", "name": "Homework", "user_id": "user-1"},
        {"id": "exam", "name": "Exam", "user_id": "user-2"},
    ]
    types = await RemoteTaskTypeRepository(remote_client, "user-1").list_all()
    assert [t.id for t in types] == ["hw"]


@pytest.mark.asyncio
async def test_get(remote, remote_client):
    remote.tables["tasks"] = [{"id": "t1", "title": "Essay", "user_id": "user-1"}]
    repo = RemoteTaskRepository(remote_client, "user-1")

    assert (await repo.get("t1")).title == "Essay"
    with pytest.raises(NotFoundError):
        await RemoteTaskRepository(remote_client, "user-2").get("t1")


@pytest.mark.asyncio
async def test_update(remote, remote_client):
    remote.tables["task_types"] = [
        {"id": "hw", "name": "Homework", "user_id": "user-1", "created_at": "2024-01-01"}
    ]
    repo = RemoteTaskTypeRepository(remote_client, "user-1")

    updated = await repo.update("hw", TaskType(id="hw", name="Problem sets"))

    assert updated.name == "Problem sets"
    assert remote.tables["task_types"][0]["name"] == "Problem sets"


@pytest.mark.asyncio
async def test_update_missing_raises(remote_client):
    with pytest.raises(NotFoundError):
        await RemoteTaskTypeRepository(remote_client, "user-1").update(
            "nope", TaskType(id="nope")
        )


@pytest.mark.asyncio
async def test_delete(remote, remote_client):
    remote.tables["tasks"] = [{"id": "t1", "user_id": "user-1"}]
    repo = RemoteTaskRepository(remote_client, "user-1")

    assert await repo.delete("t1") is True
    assert await repo.delete("t1") is False
    assert remote.tables["tasks"] == []


@pytest.mark.asyncio
async def test_class_syllabus_stored_as_json_text(remote, remote_client):
    repo = RemoteClassRepository(remote_client, "user-1")
    school_class = SchoolClass(
        id="c1", name="CS 175", syllabus=SyllabusAttachment.from_bytes("a.pdf", b"abc")
    )

    added = await repo.add(school_class)

    row = remote.tables["classes"][0]
    assert isinstance(row["syllabus_json"], str)
    assert added.syllabus.filename == "a.pdf"
    fetched = await repo.get("c1")
    assert fetched.syllabus.decode() == b"abc"
