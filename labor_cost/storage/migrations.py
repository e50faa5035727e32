"""Versioned upgrade rules applied to stored records at load time.

Older stored data may lack fields that the current models require. Each
migration fills one such field, is identified by a version number and a
name, and runs once: the record store persists the schema version after
applying pending migrations.

Rules:
    1. dublin-rate-default: if Dublin rate is absent, set it to 1.2x local rate
    2. project-rate-type-default: if a project has no rate type, use "local"
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Callable, Dict, List, Tuple, Union

logger = logging.getLogger(__name__)

DUBLIN_RATE_FACTOR = Decimal("1.2")

RawRecord = Dict[str, Any]
RawRecords = Dict[str, List[RawRecord]]


def default_dublin_rate(local_rate: Union[int, float, str, Decimal]) -> Decimal:
    """Dublin rate used when none is given: 1.2x the local rate.

    Example:
        >>> default_dublin_rate(45)
        Decimal('54.0')
    """
    return Decimal(str(local_rate)) * DUBLIN_RATE_FACTOR


def _fill_dublin_rate(record: RawRecord) -> RawRecord:
    if record.get("dublinRate") is not None or record.get("hourlyRate") is None:
        return record
    return {**record, "dublinRate": str(default_dublin_rate(record["hourlyRate"]))}


def _fill_rate_type(record: RawRecord) -> RawRecord:
    if record.get("rateType"):
        return record
    return {**record, "rateType": "local"}


@dataclass(frozen=True)
class Migration:
    """A single named upgrade rule for one stored list.

    Attributes:
        version: Schema version the rule upgrades to
        name: Short rule name used in logs
        description: The rule in plain words
        key: Store key of the list the rule applies to
        apply: Function upgrading one raw record, returning a new dict
    """

    version: int
    name: str
    description: str
    key: str
    apply: Callable[[RawRecord], RawRecord]


MIGRATIONS: List[Migration] = [
    Migration(
        version=1,
        name="dublin-rate-default",
        description="If Dublin rate is absent, set it to 1.2x local rate",
        key="employees",
        apply=_fill_dublin_rate,
    ),
    Migration(
        version=2,
        name="project-rate-type-default",
        description='If a project has no rate type, use the "local" rate',
        key="projects",
        apply=_fill_rate_type,
    ),
]

CURRENT_SCHEMA_VERSION = max(m.version for m in MIGRATIONS)


def pending_migrations(from_version: int) -> List[Migration]:
    """Migrations newer than ``from_version``, in version order."""
    return sorted(
        (m for m in MIGRATIONS if m.version > from_version), key=lambda m: m.version
    )


def migrate_records(
    raw: RawRecords, from_version: int
) -> Tuple[RawRecords, int, List[str]]:
    """Apply every pending migration to raw stored records.

    The input is not modified.

    Args:
        raw: Raw record lists keyed by store key
        from_version: Schema version the records were stored with

    Returns:
        Tuple of (migrated records, resulting schema version, applied
        migration names)
    """
    migrated: RawRecords = {key: list(records) for key, records in raw.items()}
    applied: List[str] = []

    for migration in pending_migrations(from_version):
        records = migrated.get(migration.key, [])
        migrated[migration.key] = [migration.apply(record) for record in records]
        applied.append(migration.name)
        logger.info(
            f"Applied migration {migration.version} ({migration.name}) "
            f"to {len(records)} {migration.key}"
        )

    return migrated, max(from_version, CURRENT_SCHEMA_VERSION), applied
