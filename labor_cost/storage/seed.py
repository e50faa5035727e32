"""Seed records used when nothing usable is stored yet."""

from typing import Any, Dict, List

SEED_EMPLOYEES: List[Dict[str, Any]] = [
    {"id": "1", "name": "John Smith", "hourlyRate": 45, "dublinRate": 55, "role": "Carpenter"},
    {"id": "2", "name": "Sarah Johnson", "hourlyRate": 55, "dublinRate": 65, "role": "Electrician"},
    {"id": "3", "name": "Mike Davis", "hourlyRate": 40, "dublinRate": 50, "role": "Laborer"},
]

SEED_PROJECTS: List[Dict[str, Any]] = [
    {"id": "1", "name": "Kitchen Renovation", "client": "Smith Residence", "status": "active", "rateType": "local"},
    {"id": "2", "name": "Bathroom Remodel", "client": "Johnson Home", "status": "active", "rateType": "dublin"},
]

SEED_TIME_ENTRIES: List[Dict[str, Any]] = [
    {"id": "1", "employeeId": "1", "projectId": "1", "date": "2025-10-28", "hours": 8},
    {"id": "2", "employeeId": "2", "projectId": "1", "date": "2025-10-28", "hours": 6},
    {"id": "3", "employeeId": "1", "projectId": "2", "date": "2025-10-29", "hours": 4},
]


def seed_records() -> Dict[str, List[Dict[str, Any]]]:
    """Fresh copies of the seed lists keyed by store key."""
    return {
        "employees": [dict(r) for r in SEED_EMPLOYEES],
        "projects": [dict(r) for r in SEED_PROJECTS],
        "timeEntries": [dict(r) for r in SEED_TIME_ENTRIES],
    }
