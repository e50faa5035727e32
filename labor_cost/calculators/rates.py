"""Rate resolution and per-entry cost calculation.

The applicable hourly rate is never stored on a time entry. It is looked up
from the employee at calculation time, using the rate selector of the
project the entry is logged against.
"""

from decimal import Decimal
from typing import Mapping, Optional

from labor_cost.models.employee import Employee
from labor_cost.models.project import Project, RateType
from labor_cost.models.time_entry import TimeEntry


def rate_for_type(employee: Employee, rate_type: RateType) -> Decimal:
    """Return the employee rate matching a rate selector.

    Example:
        >>> rate_for_type(employee, "dublin")
        Decimal('55')
    """
    return employee.dublin_rate if rate_type == "dublin" else employee.local_rate


def resolve_rate(employee: Employee, project: Project) -> Decimal:
    """Return the hourly rate that applies to work by ``employee`` on ``project``.

    Args:
        employee: Employee whose rates are used
        project: Project whose ``rate_type`` selects the rate

    Returns:
        ``employee.dublin_rate`` for Dublin projects, otherwise
        ``employee.local_rate``
    """
    return rate_for_type(employee, project.rate_type)


def resolve_entry_rate(
    entry: TimeEntry,
    employees: Mapping[str, Employee],
    projects: Mapping[str, Project],
) -> Optional[Decimal]:
    """Resolve the rate for a single time entry from lookup tables.

    Args:
        entry: Time entry to price
        employees: Employees by id
        projects: Projects by id

    Returns:
        The applicable rate, or None when either the employee or the project
        cannot be found. None is the zero-contribution sentinel; what happens
        to the entry's hours is up to the caller.
    """
    employee = employees.get(entry.employee_id)
    project = projects.get(entry.project_id)
    if employee is None or project is None:
        return None
    return resolve_rate(employee, project)


def calculate_entry_cost(hours: Decimal, rate: Optional[Decimal]) -> Decimal:
    """Cost contribution of an entry: hours x rate, without rounding.

    A missing rate contributes zero.

    Example:
        >>> calculate_entry_cost(Decimal("8"), Decimal("55"))
        Decimal('440')
    """
    if rate is None:
        return Decimal("0")
    return hours * rate
