"""Repository interfaces for StudyPlan CLI.

These abstract base classes are the "Ports" of the storage layer.

Implementations (Adapters) are in:
- studyplan_cli.adapters.sqlite / studyplan_cli.adapters.memory (entity stores)
- studyplan_cli.adapters.local (collections kept in an entity store)
- studyplan_cli.adapters.remote (remote PostgREST store)
"""

from .repository import (
    CLASSES_KEY,
    LAST_SYNC_KEY,
    SETTINGS_KEY,
    TASK_TYPES_KEY,
    TASKS_KEY,
    ClassRepository,
    EntityStore,
    TaskRepository,
    TaskTypeRepository,
)

__all__ = [
    "EntityStore",
    "TaskRepository",
    "ClassRepository",
    "TaskTypeRepository",
    "TASKS_KEY",
    "CLASSES_KEY",
    "TASK_TYPES_KEY",
    "LAST_SYNC_KEY",
    "SETTINGS_KEY",
]
