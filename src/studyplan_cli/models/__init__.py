"""StudyPlan domain models.

Pydantic models for the planner entities (classes, task types, tasks) and the
application configuration.
"""

from .config_models import AppConfig
from .core import (
    PlannerSettings,
    SchoolClass,
    SyllabusAttachment,
    Task,
    TaskType,
    generate_entity_id,
    generate_task_id,
)

__all__ = [
    "Task",
    "TaskType",
    "SchoolClass",
    "SyllabusAttachment",
    "PlannerSettings",
    "generate_entity_id",
    "generate_task_id",
    "AppConfig",
]
