"""Persistence of employees, projects and time entries."""

from .kv_store import FileKeyValueStore, InMemoryKeyValueStore, KeyValueStore
from .migrations import (
    CURRENT_SCHEMA_VERSION,
    MIGRATIONS,
    Migration,
    default_dublin_rate,
    migrate_records,
    pending_migrations,
)
from .record_store import (
    EMPLOYEES_KEY,
    PROJECTS_KEY,
    RECORD_KEYS,
    SCHEMA_VERSION_KEY,
    TIME_ENTRIES_KEY,
    LaborCostRecords,
    LoadReport,
    RecordStore,
)
from .repository import LaborCostRepository, generate_id
from .seed import SEED_EMPLOYEES, SEED_PROJECTS, SEED_TIME_ENTRIES, seed_records

__all__ = [
    "KeyValueStore",
    "InMemoryKeyValueStore",
    "FileKeyValueStore",
    "Migration",
    "MIGRATIONS",
    "CURRENT_SCHEMA_VERSION",
    "default_dublin_rate",
    "migrate_records",
    "pending_migrations",
    "EMPLOYEES_KEY",
    "PROJECTS_KEY",
    "TIME_ENTRIES_KEY",
    "SCHEMA_VERSION_KEY",
    "RECORD_KEYS",
    "LaborCostRecords",
    "LoadReport",
    "RecordStore",
    "LaborCostRepository",
    "generate_id",
    "SEED_EMPLOYEES",
    "SEED_PROJECTS",
    "SEED_TIME_ENTRIES",
    "seed_records",
]
