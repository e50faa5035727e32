"""Repository exposing record operations over the record store.

The repository owns the in-memory record lists for a session. Every change
persists the affected list through the injected ``RecordStore`` (full
replace) and notifies registered change listeners so that derived weekly
aggregates can be recomputed.
"""

import datetime as dt
import logging
import uuid
from decimal import Decimal
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple, Union

from labor_cost.aggregators.weekly_cost_aggregator import WeeklyCostAggregator
from labor_cost.errors import RecordNotFoundError
from labor_cost.models.employee import Employee
from labor_cost.models.project import Project
from labor_cost.models.time_entry import TimeEntry
from labor_cost.storage.migrations import default_dublin_rate
from labor_cost.storage.record_store import (
    EMPLOYEES_KEY,
    PROJECTS_KEY,
    TIME_ENTRIES_KEY,
    LaborCostRecords,
    RecordStore,
)

logger = logging.getLogger(__name__)

ChangeListener = Callable[[str], None]
Number = Union[int, float, str, Decimal]

_EMPLOYEE_FIELDS = {"name", "role", "local_rate", "dublin_rate"}
_PROJECT_FIELDS = {"name", "client", "status", "rate_type"}


def generate_id() -> str:
    """Generate a unique record identifier."""
    return uuid.uuid4().hex


class LaborCostRepository:
    """CRUD operations for employees, projects and time entries.

    Attributes:
        store: Record store used for loading and saving

    Example:
        >>> repo = LaborCostRepository(RecordStore(InMemoryKeyValueStore()))
        >>> employee = repo.add_employee("Ann Lee", "Plumber", local_rate=50)
        >>> employee.dublin_rate
        Decimal('60.0')
    """

    def __init__(self, store: RecordStore, records: Optional[LaborCostRecords] = None):
        """
        Initialize the repository.

        Args:
            store: Record store to load from and save to
            records: Already loaded records; loaded from the store when omitted
        """
        self.store = store
        self._records = records if records is not None else store.load()
        self._listeners: List[ChangeListener] = []

    # ------------------------------------------------------------------ reads

    @property
    def employees(self) -> List[Employee]:
        return list(self._records.employees)

    @property
    def projects(self) -> List[Project]:
        return list(self._records.projects)

    @property
    def time_entries(self) -> List[TimeEntry]:
        return list(self._records.time_entries)

    def find_employee(self, employee_id: str) -> Optional[Employee]:
        return next((e for e in self._records.employees if e.id == employee_id), None)

    def find_project(self, project_id: str) -> Optional[Project]:
        return next((p for p in self._records.projects if p.id == project_id), None)

    def get_employee(self, employee_id: str) -> Employee:
        """Return an employee by id.

        Raises:
            RecordNotFoundError: If no employee has this id
        """
        employee = self.find_employee(employee_id)
        if employee is None:
            raise RecordNotFoundError("employee", employee_id)
        return employee

    def get_project(self, project_id: str) -> Project:
        """Return a project by id.

        Raises:
            RecordNotFoundError: If no project has this id
        """
        project = self.find_project(project_id)
        if project is None:
            raise RecordNotFoundError("project", project_id)
        return project

    def entries_for_employee(self, employee_id: str) -> List[TimeEntry]:
        return [e for e in self._records.time_entries if e.employee_id == employee_id]

    def entries_for_project(self, project_id: str) -> List[TimeEntry]:
        return [e for e in self._records.time_entries if e.project_id == project_id]

    def aggregator(self) -> WeeklyCostAggregator:
        """Aggregator over the current employee and project lookups."""
        return WeeklyCostAggregator(self._records.employees, self._records.projects)

    # -------------------------------------------------------------- listeners

    def add_listener(self, listener: ChangeListener) -> None:
        """Register a callback invoked with the store key of each change."""
        self._listeners.append(listener)

    def remove_listener(self, listener: ChangeListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _commit(self, key: str) -> None:
        self.store.save(self._records, keys=[key])
        for listener in list(self._listeners):
            listener(key)

    # -------------------------------------------------------------- employees

    def add_employee(
        self,
        name: str,
        role: str,
        local_rate: Number,
        dublin_rate: Optional[Number] = None,
    ) -> Employee:
        """Create and persist an employee.

        A missing Dublin rate follows the 1.2x local rate rule.
        """
        if dublin_rate is None:
            dublin_rate = default_dublin_rate(local_rate)

        employee = Employee(
            id=generate_id(),
            name=name,
            role=role,
            local_rate=local_rate,
            dublin_rate=dublin_rate,
        )
        self._records.employees.append(employee)
        self._commit(EMPLOYEES_KEY)
        logger.info(f"Added employee {employee.id} ({employee.name})")
        return employee

    def update_employee(self, employee_id: str, **updates: Any) -> Employee:
        """Apply field updates to an employee.

        Args:
            employee_id: Employee to update
            **updates: Any of name, role, local_rate, dublin_rate

        Raises:
            RecordNotFoundError: If the employee does not exist
            ValueError: If an unknown field is given
        """
        current = self.get_employee(employee_id)
        updated = Employee.model_validate(
            {**current.model_dump(), **self._clean_updates(updates, _EMPLOYEE_FIELDS)}
        )
        self._replace(self._records.employees, updated)
        self._commit(EMPLOYEES_KEY)
        logger.info(f"Updated employee {employee_id}")
        return updated

    def delete_employee(self, employee_id: str) -> None:
        """Delete an employee. Their time entries are kept.

        Raises:
            RecordNotFoundError: If the employee does not exist
        """
        employee = self.get_employee(employee_id)
        self._records.employees.remove(employee)
        self._commit(EMPLOYEES_KEY)
        logger.info(f"Deleted employee {employee_id}")

    # --------------------------------------------------------------- projects

    def add_project(
        self,
        name: str,
        client: str,
        status: str = "active",
        rate_type: str = "local",
    ) -> Project:
        """Create and persist a project."""
        project = Project(
            id=generate_id(),
            name=name,
            client=client,
            status=status,
            rate_type=rate_type,
        )
        self._records.projects.append(project)
        self._commit(PROJECTS_KEY)
        logger.info(f"Added project {project.id} ({project.name})")
        return project

    def update_project(self, project_id: str, **updates: Any) -> Project:
        """Apply field updates to a project.

        Changing ``rate_type`` changes the cost of every entry already logged
        against the project, since rates are resolved at aggregation time.

        Raises:
            RecordNotFoundError: If the project does not exist
            ValueError: If an unknown field is given
        """
        current = self.get_project(project_id)
        updated = Project.model_validate(
            {**current.model_dump(), **self._clean_updates(updates, _PROJECT_FIELDS)}
        )
        self._replace(self._records.projects, updated)
        self._commit(PROJECTS_KEY)
        logger.info(f"Updated project {project_id}")
        return updated

    # ------------------------------------------------------------ time entries

    def log_time(
        self,
        project_id: str,
        date: dt.date,
        assignments: Iterable[Tuple[str, Number]],
    ) -> List[TimeEntry]:
        """Log hours for several employees on one project and date.

        Assignments without an employee or with hours of zero or less are
        dropped.

        Args:
            project_id: Project the work was done on
            date: Date of the work
            assignments: (employee_id, hours) pairs

        Returns:
            The created time entries

        Raises:
            RecordNotFoundError: If the project or an assigned employee does
                not exist
        """
        self.get_project(project_id)

        new_entries: List[TimeEntry] = []
        for employee_id, hours in assignments:
            if not employee_id or Decimal(str(hours)) <= 0:
                logger.debug(f"Dropping assignment ({employee_id!r}, {hours})")
                continue
            self.get_employee(employee_id)
            new_entries.append(
                TimeEntry(
                    id=generate_id(),
                    employee_id=employee_id,
                    project_id=project_id,
                    date=date,
                    hours=hours,
                )
            )

        if new_entries:
            self._records.time_entries.extend(new_entries)
            self._commit(TIME_ENTRIES_KEY)
            logger.info(
                f"Logged {len(new_entries)} time entries on project {project_id} "
                f"for {date.isoformat()}"
            )
        return new_entries

    # ---------------------------------------------------------------- helpers

    @staticmethod
    def _clean_updates(updates: Dict[str, Any], allowed: set) -> Dict[str, Any]:
        unknown = set(updates) - allowed
        if unknown:
            raise ValueError(f"Unknown fields: {', '.join(sorted(unknown))}")
        return {k: v for k, v in updates.items() if v is not None}

    @staticmethod
    def _replace(records: list, updated) -> None:
        for i, record in enumerate(records):
            if record.id == updated.id:
                records[i] = updated
                return
