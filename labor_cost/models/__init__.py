"""Data models for the labor cost tracker.

This package contains Pydantic models for all stored records:
- BaseDataModel: Base class with common configuration
- Employee: Employee with local and Dublin hourly rates
- Project: Project with its rate selector
- TimeEntry: Hours logged by an employee against a project
- SummaryRow: Weekly summary row of the remote mirror table
"""

from labor_cost.models.base import BaseDataModel
from labor_cost.models.employee import Employee
from labor_cost.models.project import Project, ProjectStatus, RateType
from labor_cost.models.summary import SUMMARY_COLUMNS, SummaryRow
from labor_cost.models.time_entry import TimeEntry

__all__ = [
    "BaseDataModel",
    "Employee",
    "Project",
    "ProjectStatus",
    "RateType",
    "SUMMARY_COLUMNS",
    "SummaryRow",
    "TimeEntry",
]
