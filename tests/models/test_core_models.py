"""Tests for the planner data models."""

import re

import pytest

from studyplan_cli.models import (
    PlannerSettings,
    SchoolClass,
    SyllabusAttachment,
    Task,
    TaskType,
    generate_entity_id,
    generate_task_id,
)


class TestTask:
    def test_reads_stored_field_names(self):
        task = Task.model_validate(
            {
                "id": "t1",
                "title": "Essay",
                "class": "cs175_1234",
                "type": "homework_5678",
                "isDuration": False,
                "dueDate": "2024-03-15",
                "dueTime": "23:59",
            }
        )
        assert task.class_id == "cs175_1234"
        assert task.type_id == "homework_5678"
        assert task.due_date == "2024-03-15"
        assert task.is_duration is False

    def test_dump_uses_stored_field_names(self):
        task = Task(id="t1", title="Essay", class_id="c1", due_date="2024-03-15")
        data = task.model_dump()
        assert data["class"] == "c1"
        assert data["dueDate"] == "2024-03-15"
        assert "class_id" not in data
        assert "due_date" not in data

    def test_blank_dates_become_none(self):
        task = Task.model_validate({"id": "t1", "dueDate": "", "startDate": "  "})
        assert task.due_date is None
        assert task.start_date is None

    def test_null_references_and_flag(self):
        task = Task.model_validate({"id": "t1", "class": None, "type": None, "isDuration": None})
        assert task.class_id == ""
        assert task.type_id == ""
        assert task.is_duration is False

    def test_unknown_fields_round_trip(self):
        task = Task.model_validate({"id": "t1", "color": "#ff0000"})
        assert task.model_dump()["color"] == "#ff0000"

    def test_display_time(self):
        deadline = Task(id="a", due_time="09:00", start_time="08:00")
        span = Task(id="b", is_duration=True, due_time="09:00", start_time="08:00")
        assert deadline.display_time == "09:00"
        assert span.display_time == "08:00"

    def test_stamped_sets_owner_and_keeps_created_at(self):
        fresh = Task(id="t1").stamped("user-1", "2024-01-01T00:00:00+00:00")
        assert fresh["user_id"] == "user-1"
        assert fresh["created_at"] == "2024-01-01T00:00:00+00:00"

        existing = Task(id="t2", created_at="2023-05-05T10:00:00+00:00")
        stamped = existing.stamped("user-1", "2024-01-01T00:00:00+00:00")
        assert stamped["created_at"] == "2023-05-05T10:00:00+00:00"

    def test_stamped_overrides_foreign_owner(self):
        task = Task(id="t1", user_id="someone-else")
        assert task.stamped("user-1", "now")["user_id"] == "user-1"


class TestSyllabus:
    def test_from_bytes_builds_data_url(self):
        attachment = SyllabusAttachment.from_bytes("outline.pdf", b"%PDF-1.4")
        assert attachment.mime_type == "application/pdf"
        assert attachment.size == 8
        assert attachment.data.startswith("data:application/pdf;base64,")
        assert attachment.decode() == b"%PDF-1.4"
        assert attachment.is_pdf

    def test_from_file(self, tmp_path):
        path = tmp_path / "syllabus.docx"
        path.write_bytes(b"x" * 2048)
        attachment = SyllabusAttachment.from_file(path)
        assert attachment.filename == "syllabus.docx"
        assert attachment.size_kb == 2
        assert not attachment.is_pdf

    def test_from_file_rejects_other_types(self, tmp_path):
        path = tmp_path / "notes.txt"
        path.write_text("hello")
        with pytest.raises(ValueError, match="Unsupported syllabus file"):
            SyllabusAttachment.from_file(path)

    def test_class_dump_uses_attachment_wire_names(self):
        school_class = SchoolClass(
            id="c1",
            name="CS 175",
            syllabus=SyllabusAttachment.from_bytes("a.pdf", b"abc"),
        )
        syllabus = school_class.model_dump()["syllabus"]
        assert syllabus["name"] == "a.pdf"
        assert syllabus["type"] == "application/pdf"
        assert syllabus["size"] == 3

    def test_decode_plain_base64(self):
        attachment = SyllabusAttachment(name="a.pdf", data="YWJj")
        assert attachment.decode() == b"abc"


class TestIds:
    def test_entity_id_from_name(self):
        assert re.fullmatch(r"cs175_\d{4}", generate_entity_id("CS 175"))

    def test_entity_id_strips_punctuation(self):
        assert re.fullmatch(r"midtermexam_\d{4}", generate_entity_id("Midterm-Exam!", "type"))

    def test_entity_id_for_empty_name(self):
        assert re.fullmatch(r"type\d+", generate_entity_id("  ", "type"))

    def test_task_ids_are_unique(self):
        assert generate_task_id() != generate_task_id()


def test_task_type_defaults():
    assert TaskType(id="t").name == ""


def test_settings_default_title():
    assert PlannerSettings().title == "UCR"
    assert PlannerSettings.model_validate({"title": "Fall 2024"}).title == "Fall 2024"
