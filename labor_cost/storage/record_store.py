"""Record store for employees, projects and time entries.

The three record lists live in a key-value store under the fixed keys
``employees``, ``projects`` and ``timeEntries``, each as a JSON array.
Writes replace a whole list; there are no partial writes.

Loading:
1. Reads each list; an absent or malformed list falls back to seed records
2. Applies pending versioned migrations to the raw records
3. Validates records into models, skipping individual invalid records
4. Persists the result when seeds were used or migrations ran
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from pydantic import ValidationError

from labor_cost.errors import StorageError
from labor_cost.models.employee import Employee
from labor_cost.models.project import Project
from labor_cost.models.time_entry import TimeEntry
from labor_cost.storage.kv_store import KeyValueStore
from labor_cost.storage.migrations import CURRENT_SCHEMA_VERSION, migrate_records
from labor_cost.storage.seed import seed_records

logger = logging.getLogger(__name__)

EMPLOYEES_KEY = "employees"
PROJECTS_KEY = "projects"
TIME_ENTRIES_KEY = "timeEntries"
SCHEMA_VERSION_KEY = "schemaVersion"

RECORD_KEYS = (EMPLOYEES_KEY, PROJECTS_KEY, TIME_ENTRIES_KEY)

_MODELS = {
    EMPLOYEES_KEY: Employee,
    PROJECTS_KEY: Project,
    TIME_ENTRIES_KEY: TimeEntry,
}


@dataclass
class LaborCostRecords:
    """All persisted records.

    Attributes:
        employees: Employees in stored order
        projects: Projects in stored order
        time_entries: Time entries in stored order
    """

    employees: List[Employee] = field(default_factory=list)
    projects: List[Project] = field(default_factory=list)
    time_entries: List[TimeEntry] = field(default_factory=list)

    def by_key(self, key: str) -> List[Any]:
        """Return the list stored under ``key``."""
        return {
            EMPLOYEES_KEY: self.employees,
            PROJECTS_KEY: self.projects,
            TIME_ENTRIES_KEY: self.time_entries,
        }[key]


@dataclass
class LoadReport:
    """What happened during the last load.

    Attributes:
        seeded_keys: Lists replaced by seed records
        applied_migrations: Names of migrations that ran
        skipped_records: Invalid records dropped during validation
        stored_version: Schema version found in the store
    """

    seeded_keys: List[str] = field(default_factory=list)
    applied_migrations: List[str] = field(default_factory=list)
    skipped_records: int = 0
    stored_version: int = 0


class RecordStore:
    """Loads and saves the labor cost records through a key-value store.

    Example:
        >>> store = RecordStore(FileKeyValueStore("/tmp/labor-cost"))
        >>> records = store.load()
        >>> [e.name for e in records.employees]
        ['John Smith', 'Sarah Johnson', 'Mike Davis']
    """

    def __init__(self, kv_store: KeyValueStore):
        """
        Initialize the record store.

        Args:
            kv_store: Underlying text key-value store
        """
        self.kv_store = kv_store
        self.last_load_report: Optional[LoadReport] = None

    def load(self) -> LaborCostRecords:
        """Load, migrate and validate all records.

        Returns:
            LaborCostRecords; never raises for bad stored data
        """
        report = LoadReport(stored_version=self._read_version())
        raw: Dict[str, List[Dict[str, Any]]] = {}
        seeds = seed_records()

        for key in RECORD_KEYS:
            parsed = self._parse_list(key, self.kv_store.get(key))
            if parsed is None:
                raw[key] = seeds[key]
                report.seeded_keys.append(key)
            else:
                raw[key] = parsed

        raw, _version, report.applied_migrations = migrate_records(
            raw, report.stored_version
        )

        records = LaborCostRecords()
        for key in RECORD_KEYS:
            valid, skipped = self._validate(key, raw[key])
            records.by_key(key).extend(valid)
            report.skipped_records += skipped

        self.last_load_report = report
        logger.info(
            f"Loaded {len(records.employees)} employees, "
            f"{len(records.projects)} projects, "
            f"{len(records.time_entries)} time entries"
        )

        if report.seeded_keys or report.applied_migrations:
            try:
                self.save(records)
            except StorageError as e:
                logger.warning(f"Could not persist loaded records: {e}")

        return records

    def save(
        self, records: LaborCostRecords, keys: Optional[Iterable[str]] = None
    ) -> None:
        """Replace stored lists with the given records.

        Args:
            records: Records to persist
            keys: Store keys to write; all three lists when omitted

        Raises:
            StorageError: If the store cannot be written
        """
        for key in keys or RECORD_KEYS:
            payload = [record.to_record() for record in records.by_key(key)]
            self.kv_store.set(key, json.dumps(payload))
        self.kv_store.set(SCHEMA_VERSION_KEY, str(CURRENT_SCHEMA_VERSION))

    def _read_version(self) -> int:
        value = self.kv_store.get(SCHEMA_VERSION_KEY)
        if value is None:
            return 0
        try:
            return int(json.loads(value))
        except (ValueError, TypeError):
            logger.warning(f"Ignoring malformed schema version: {value!r}")
            return 0

    def _parse_list(
        self, key: str, value: Optional[str]
    ) -> Optional[List[Dict[str, Any]]]:
        """Parse a stored JSON list, returning None when absent or malformed."""
        if value is None:
            logger.info(f"No stored {key}, using seed records")
            return None

        try:
            parsed = json.loads(value)
        except json.JSONDecodeError as e:
            logger.warning(f"Stored {key} is not valid JSON ({e}), using seed records")
            return None

        if not isinstance(parsed, list) or not all(
            isinstance(item, dict) for item in parsed
        ):
            logger.warning(f"Stored {key} is not a list of records, using seed records")
            return None

        return parsed

    def _validate(self, key: str, raw_records: List[Dict[str, Any]]) -> tuple:
        """Validate raw records into models.

        Returns:
            Tuple of (valid models, number of skipped records)
        """
        model = _MODELS[key]
        valid = []
        skipped = 0
        for raw in raw_records:
            try:
                valid.append(model.model_validate(raw))
            except ValidationError as e:
                skipped += 1
                logger.warning(
                    f"Skipping invalid {key} record {raw.get('id', '?')}: "
                    f"{e.error_count()} validation error(s)"
                )
        return valid, skipped
