"""Adapters module - Repository implementations for the storage backends.

- sqlite: Local SQLite vault (entity store)
- memory: In-process entity store
- local: Entity repositories over any entity store
- remote: Entity repositories over the remote store
"""

from .local import LocalClassRepository, LocalTaskRepository, LocalTaskTypeRepository
from .memory import MemoryEntityStore
from .remote import (
    RemoteClassRepository,
    RemoteTaskRepository,
    RemoteTaskTypeRepository,
)
from .sqlite import SqliteEntityStore

__all__ = [
    "SqliteEntityStore",
    "MemoryEntityStore",
    "LocalTaskRepository",
    "LocalClassRepository",
    "LocalTaskTypeRepository",
    "RemoteTaskRepository",
    "RemoteClassRepository",
    "RemoteTaskTypeRepository",
]
