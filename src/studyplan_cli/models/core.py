"""Planner data models.

Stored and remote records use the field names of the web planner
(``isDuration``, ``dueDate``, ``class`` ...). The models expose snake_case
attributes and keep the stored names as aliases, so ``model_dump()`` always
produces the stored shape.
"""

from __future__ import annotations

import base64
import mimetypes
import re
import time
import uuid
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

SYLLABUS_EXTENSIONS = (".pdf", ".doc", ".docx")

DEFAULT_DUE_TIME = "23:59"
DEFAULT_START_TIME = "08:00"
DEFAULT_END_TIME = "11:00"


class PlannerModel(BaseModel):
    """Base model for stored planner records.

    Extra fields are kept so rows round-trip between stores untouched.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    def model_dump(self, **kwargs: Any) -> dict[str, Any]:
        kwargs.setdefault("by_alias", True)
        return super().model_dump(**kwargs)

    def stamped(self, user_id: str, created_at: str) -> dict[str, Any]:
        """Return the stored shape owned by ``user_id``.

        ``created_at`` is only used when the record has none yet.
        """
        data = self.model_dump()
        data["user_id"] = user_id
        data["created_at"] = data.get("created_at") or created_at
        return data


class SyllabusAttachment(BaseModel):
    """Syllabus file attached to a class.

    Attributes:
        filename: Original file name
        mime_type: MIME type of the file
        size: File size in bytes
        data: ``data:`` URL holding the base64-encoded file content
    """

    model_config = ConfigDict(populate_by_name=True)

    filename: str = Field(alias="name")
    mime_type: str = Field(default="application/octet-stream", alias="type")
    size: int = Field(default=0, ge=0)
    data: str

    @classmethod
    def from_bytes(
        cls, filename: str, content: bytes, mime_type: str | None = None
    ) -> SyllabusAttachment:
        if mime_type is None:
            mime_type = mimetypes.guess_type(filename)[0] or "application/octet-stream"
        encoded = base64.b64encode(content).decode("ascii")
        return cls(
            filename=filename,
            mime_type=mime_type,
            size=len(content),
            data=f"data:{mime_type};base64,{encoded}",
        )

    @classmethod
    def from_file(cls, path: str | Path) -> SyllabusAttachment:
        """Read a syllabus file from disk.

        Raises:
            ValueError: If the extension is not one of ``SYLLABUS_EXTENSIONS``
        """
        path = Path(path)
        if path.suffix.lower() not in SYLLABUS_EXTENSIONS:
            raise ValueError(
                f"Unsupported syllabus file '{path.name}'. "
                f"Expected one of: {', '.join(SYLLABUS_EXTENSIONS)}"
            )
        return cls.from_bytes(path.name, path.read_bytes())

    def decode(self) -> bytes:
        """Return the raw file content."""
        payload = self.data
        if payload.startswith("data:") and "," in payload:
            payload = payload.split(",", 1)[1]
        return base64.b64decode(payload)

    @property
    def size_kb(self) -> int:
        return round(self.size / 1024)

    @property
    def is_pdf(self) -> bool:
        return self.mime_type == "application/pdf"


class SchoolClass(PlannerModel):
    """A class (course) shown in the sidebar.

    Attributes:
        id: Unique identifier
        name: Display name (e.g. "CS 175")
        syllabus: Optional attached syllabus
        user_id: Owning user (remote rows only)
        created_at: Creation timestamp (ISO-8601)
    """

    id: str
    name: str = ""
    syllabus: SyllabusAttachment | None = None
    user_id: str | None = None
    created_at: str | None = None


class TaskType(PlannerModel):
    """A task category such as "Homework" or "Midterm"."""

    id: str
    name: str = ""
    user_id: str | None = None
    created_at: str | None = None


class Task(PlannerModel):
    """A calendar task.

    ``is_duration`` decides which date fields are authoritative: deadline
    tasks use ``due_date``/``due_time``, duration tasks the start/end pair.
    ``date`` is the legacy timestamp written before ``due_date`` existed.

    Attributes:
        id: Unique identifier, stable across stores
        title: Task title
        class_id: Referenced class id (wire name ``class``), may be empty
        type_id: Referenced task type id (wire name ``type``), may be empty
        is_duration: True for duration tasks
        due_date: Deadline date, ``YYYY-MM-DD``
        due_time: Deadline time, ``HH:MM``
        start_date: Duration start date
        start_time: Duration start time
        end_date: Duration end date
        end_time: Duration end time
        date: Legacy full timestamp
        user_id: Owning user (remote rows only)
        created_at: Creation timestamp (ISO-8601)
    """

    id: str
    title: str = ""
    class_id: str = Field(default="", alias="class")
    type_id: str = Field(default="", alias="type")
    is_duration: bool = Field(default=False, alias="isDuration")
    due_date: str | None = Field(default=None, alias="dueDate")
    due_time: str | None = Field(default=None, alias="dueTime")
    start_date: str | None = Field(default=None, alias="startDate")
    start_time: str | None = Field(default=None, alias="startTime")
    end_date: str | None = Field(default=None, alias="endDate")
    end_time: str | None = Field(default=None, alias="endTime")
    date: str | None = None
    user_id: str | None = None
    created_at: str | None = None

    @field_validator("class_id", "type_id", mode="before")
    @classmethod
    def _none_to_empty(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator(
        "due_date",
        "due_time",
        "start_date",
        "start_time",
        "end_date",
        "end_time",
        "date",
        mode="before",
    )
    @classmethod
    def _blank_to_none(cls, v: Any) -> Any:
        # Unset form inputs are stored as empty strings.
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("is_duration", mode="before")
    @classmethod
    def _null_flag(cls, v: Any) -> Any:
        return False if v is None else v

    @property
    def display_time(self) -> str | None:
        """Time of day shown next to the task on the calendar."""
        return self.start_time if self.is_duration else self.due_time


class PlannerSettings(BaseModel):
    """Locally stored planner settings."""

    model_config = ConfigDict(extra="allow")

    title: str = "UCR"


_SLUG_RE = re.compile(r"[^a-z0-9]")


def generate_entity_id(name: str, prefix: str = "class") -> str:
    """Generate an id for a class or task type from its display name.

    "CS 175" becomes ``cs175_<last 4 digits of epoch ms>``. An empty name
    yields ``<prefix><epoch ms>``.
    """
    millis = str(int(time.time() * 1000))
    slug = _SLUG_RE.sub("", name.strip().lower())
    if not slug:
        return f"{prefix}{millis}"
    return f"{slug}_{millis[-4:]}"


def generate_task_id() -> str:
    """Generate a new task id (UUID4 string)."""
    return str(uuid.uuid4())
