"""Schema of the local SQLite vault.

The vault is a key-value table: every planner collection is stored as one
JSON document under a fixed key.
"""

from __future__ import annotations

# Stored in PRAGMA user_version
SCHEMA_VERSION = 1

CREATE_ENTITIES_TABLE = """
CREATE TABLE IF NOT EXISTS entities (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at DATETIME NOT NULL
)
"""

ALL_TABLES = [CREATE_ENTITIES_TABLE]
