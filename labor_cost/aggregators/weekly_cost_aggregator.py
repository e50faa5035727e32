"""Weekly cost aggregation for employee and project views.

This module groups time entries into Sunday to Saturday weeks and computes
hours, cost and entry counts per week, using the project's rate selector to
pick each employee's rate. It also builds the per-entry weekly timesheets
used by exports, overall totals, per-date groups and a pandas week matrix.

All functions are pure: inputs are never mutated and repeated calls with the
same inputs give identical results.
"""

import datetime as dt
import logging
from collections import defaultdict
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Dict, Iterable, List, Literal, Mapping, Optional, Union

import pandas as pd

from labor_cost.calculators.rates import calculate_entry_cost, resolve_entry_rate
from labor_cost.calculators.weeks import iter_weeks, week_bounds
from labor_cost.models.employee import Employee
from labor_cost.models.project import Project, RateType
from labor_cost.models.time_entry import TimeEntry

logger = logging.getLogger(__name__)

UNKNOWN_PROJECT = "Unknown Project"
UNKNOWN_EMPLOYEE = "Unknown Employee"

Subject = Literal["employee", "project"]


class MissingReferencePolicy(Enum):
    """What to do with an entry whose employee or project cannot be found."""

    # Hours and entry count are kept, the entry costs nothing
    INCLUDE_AT_ZERO_COST = "include_at_zero_cost"
    # The entry is left out of every total
    EXCLUDE = "exclude"


@dataclass(frozen=True)
class GroupBy:
    """Subject of an aggregation: a single employee or a single project.

    Example:
        >>> GroupBy.employee("1").subject
        'employee'
    """

    subject: Subject
    subject_id: str

    @classmethod
    def employee(cls, employee_id: str) -> "GroupBy":
        return cls(subject="employee", subject_id=employee_id)

    @classmethod
    def project(cls, project_id: str) -> "GroupBy":
        return cls(subject="project", subject_id=project_id)

    def matches(self, entry: TimeEntry) -> bool:
        """Whether the entry belongs to this subject."""
        if self.subject == "employee":
            return entry.employee_id == self.subject_id
        return entry.project_id == self.subject_id

    @property
    def default_policy(self) -> MissingReferencePolicy:
        """Missing-reference policy used when the caller does not pick one.

        Employee views keep every hour the employee logged; project views
        only count work they can price.
        """
        if self.subject == "employee":
            return MissingReferencePolicy.INCLUDE_AT_ZERO_COST
        return MissingReferencePolicy.EXCLUDE


@dataclass
class WeeklyAggregate:
    """Hours and cost of one subject for one week.

    Attributes:
        subject: "employee" or "project"
        subject_id: Identifier of the employee or project
        week_start: Sunday opening the week
        week_end: Saturday closing the week (week_start + 6 days)
        total_hours: Sum of hours
        total_cost: Sum of hours x resolved rate, unrounded
        entry_count: Number of entries counted

    Example:
        >>> aggregate.week_start, aggregate.total_cost
        (datetime.date(2025, 10, 26), Decimal('660'))
    """

    subject: Subject
    subject_id: str
    week_start: dt.date
    week_end: dt.date
    total_hours: Decimal
    total_cost: Decimal
    entry_count: int


@dataclass
class DailyLineItem:
    """One time entry as a priced timesheet line."""

    entry_id: str
    date: dt.date
    employee_id: str
    employee_name: str
    project_id: str
    project_name: str
    rate_type: Optional[RateType]
    rate: Optional[Decimal]
    hours: Decimal
    cost: Decimal


@dataclass
class WeeklyTimesheet:
    """A week of priced line items, ordered by date.

    Attributes:
        week_start: Sunday opening the week
        week_end: Saturday closing the week
        daily_entries: Line items ascending by date
        total_hours: Sum of line item hours
        total_cost: Sum of line item costs
    """

    week_start: dt.date
    week_end: dt.date
    daily_entries: List[DailyLineItem] = field(default_factory=list)
    total_hours: Decimal = Decimal("0")
    total_cost: Decimal = Decimal("0")

    @property
    def entry_count(self) -> int:
        return len(self.daily_entries)


@dataclass
class CostTotals:
    """Overall hours and cost of a subject across all weeks.

    Attributes:
        total_hours: Sum of counted hours
        total_cost: Sum of counted costs
        entry_count: Number of entries counted
        skipped_entries: Entries left out because of missing references
    """

    total_hours: Decimal
    total_cost: Decimal
    entry_count: int
    skipped_entries: int = 0


@dataclass
class DateGroup:
    """Entries of a subject logged on one date, with their total cost."""

    date: dt.date
    entries: List[TimeEntry]
    total_hours: Decimal
    total_cost: Decimal


@dataclass
class ProjectCost:
    """Hours and cost one employee logged on one project."""

    project_id: str
    project_name: str
    client: str
    total_hours: Decimal
    total_cost: Decimal
    entry_count: int


@dataclass
class _PricedEntry:
    entry: TimeEntry
    rate: Optional[Decimal]
    cost: Decimal


RecordsArg = Union[Mapping[str, Employee], Iterable[Employee]]
ProjectsArg = Union[Mapping[str, Project], Iterable[Project]]


def _index(records) -> Dict[str, object]:
    if isinstance(records, Mapping):
        return dict(records)
    return {record.id: record for record in records}


class WeeklyCostAggregator:
    """Computes weekly cost aggregates from time entries.

    The aggregator holds the employee and project lookup tables; the entries
    and the subject are passed per call.

    The aggregator:
    1. Selects the entries of one employee or one project
    2. Resolves each entry's rate from the employee, using the project's
       rate selector
    3. Applies the missing-reference policy to unresolvable entries
    4. Buckets entries by Sunday-start week and sums hours, cost and count

    Example:
        >>> aggregator = WeeklyCostAggregator(employees, projects)
        >>> weeks = aggregator.aggregate(entries, GroupBy.employee("1"))
        >>> weeks[0].total_hours
        Decimal('12')
    """

    def __init__(self, employees: RecordsArg, projects: ProjectsArg):
        """Initialize with lookup tables.

        Args:
            employees: Employees, as a list or a mapping by id
            projects: Projects, as a list or a mapping by id
        """
        self.employees: Dict[str, Employee] = _index(employees)
        self.projects: Dict[str, Project] = _index(projects)

    def _price_entries(
        self,
        entries: Iterable[TimeEntry],
        group_by: GroupBy,
        policy: Optional[MissingReferencePolicy],
    ) -> tuple:
        """Select, price and filter the entries of a subject.

        Returns:
            Tuple of (priced entries in input order, skipped count)
        """
        policy = policy or group_by.default_policy
        priced: List[_PricedEntry] = []
        skipped = 0

        for entry in entries:
            if not group_by.matches(entry):
                continue

            rate = resolve_entry_rate(entry, self.employees, self.projects)
            if rate is None:
                if policy is MissingReferencePolicy.EXCLUDE:
                    skipped += 1
                    continue
                logger.debug(
                    f"Entry {entry.id} has a missing reference, "
                    f"counting its hours at zero cost"
                )

            priced.append(
                _PricedEntry(
                    entry=entry, rate=rate, cost=calculate_entry_cost(entry.hours, rate)
                )
            )

        if skipped:
            logger.debug(
                f"Skipped {skipped} entries with missing references for "
                f"{group_by.subject} {group_by.subject_id}"
            )

        return priced, skipped

    def aggregate(
        self,
        entries: Iterable[TimeEntry],
        group_by: GroupBy,
        policy: Optional[MissingReferencePolicy] = None,
    ) -> List[WeeklyAggregate]:
        """Calculate weekly totals for one employee or one project.

        Args:
            entries: Time entries; entries of other subjects are ignored
            group_by: The employee or project to aggregate
            policy: Missing-reference policy, defaults to the subject's policy

        Returns:
            One WeeklyAggregate per week with counted entries, most recent
            week first
        """
        priced, _ = self._price_entries(entries, group_by, policy)

        buckets: Dict[dt.date, List[_PricedEntry]] = defaultdict(list)
        for item in priced:
            start, _end = week_bounds(item.entry.date)
            buckets[start].append(item)

        result: List[WeeklyAggregate] = []
        for start, items in buckets.items():
            _start, end = week_bounds(start)
            result.append(
                WeeklyAggregate(
                    subject=group_by.subject,
                    subject_id=group_by.subject_id,
                    week_start=start,
                    week_end=end,
                    total_hours=sum((i.entry.hours for i in items), Decimal("0")),
                    total_cost=sum((i.cost for i in items), Decimal("0")),
                    entry_count=len(items),
                )
            )

        result.sort(key=lambda a: a.week_start, reverse=True)
        logger.debug(
            f"Aggregated {len(priced)} entries into {len(result)} weeks for "
            f"{group_by.subject} {group_by.subject_id}"
        )
        return result

    def build_weekly_timesheets(
        self,
        entries: Iterable[TimeEntry],
        group_by: GroupBy,
        policy: Optional[MissingReferencePolicy] = None,
    ) -> List[WeeklyTimesheet]:
        """Build weekly timesheets with one priced line per entry.

        Args:
            entries: Time entries; entries of other subjects are ignored
            group_by: The employee or project to build timesheets for
            policy: Missing-reference policy, defaults to the subject's policy

        Returns:
            Timesheets with the most recent week first; line items within a
            week ascend by date
        """
        priced, _ = self._price_entries(entries, group_by, policy)

        sheets: Dict[dt.date, WeeklyTimesheet] = {}
        for item in priced:
            start, end = week_bounds(item.entry.date)
            sheet = sheets.get(start)
            if sheet is None:
                sheet = WeeklyTimesheet(week_start=start, week_end=end)
                sheets[start] = sheet

            sheet.daily_entries.append(self._line_item(item))
            sheet.total_hours += item.entry.hours
            sheet.total_cost += item.cost

        result = sorted(sheets.values(), key=lambda s: s.week_start, reverse=True)
        for sheet in result:
            # sort() is stable, same-day lines keep entry order
            sheet.daily_entries.sort(key=lambda line: line.date)
        return result

    def _line_item(self, item: _PricedEntry) -> DailyLineItem:
        entry = item.entry
        employee = self.employees.get(entry.employee_id)
        project = self.projects.get(entry.project_id)
        return DailyLineItem(
            entry_id=entry.id,
            date=entry.date,
            employee_id=entry.employee_id,
            employee_name=employee.name if employee else UNKNOWN_EMPLOYEE,
            project_id=entry.project_id,
            project_name=project.name if project else UNKNOWN_PROJECT,
            rate_type=project.rate_type if project and employee else None,
            rate=item.rate,
            hours=entry.hours,
            cost=item.cost,
        )

    def calculate_totals(
        self,
        entries: Iterable[TimeEntry],
        group_by: GroupBy,
        policy: Optional[MissingReferencePolicy] = None,
    ) -> CostTotals:
        """Calculate overall hours and cost of a subject.

        Returns:
            CostTotals across all weeks
        """
        priced, skipped = self._price_entries(entries, group_by, policy)
        return CostTotals(
            total_hours=sum((i.entry.hours for i in priced), Decimal("0")),
            total_cost=sum((i.cost for i in priced), Decimal("0")),
            entry_count=len(priced),
            skipped_entries=skipped,
        )

    def calculate_project_costs(
        self,
        entries: Iterable[TimeEntry],
        policy: Optional[MissingReferencePolicy] = None,
    ) -> Dict[str, CostTotals]:
        """Calculate totals for every known project.

        Returns:
            Dictionary mapping project id to CostTotals, in project order
        """
        entries = list(entries)
        return {
            project_id: self.calculate_totals(
                entries, GroupBy.project(project_id), policy
            )
            for project_id in self.projects
        }

    def calculate_employee_project_costs(
        self,
        entries: Iterable[TimeEntry],
        employee_id: str,
        policy: Optional[MissingReferencePolicy] = None,
    ) -> List[ProjectCost]:
        """Break an employee's hours and cost down by project.

        Each entry is priced with the rate its project selects, so work on a
        Dublin project is costed at the employee's Dublin rate.

        Args:
            entries: Time entries; entries of other employees are ignored
            employee_id: Employee to break down
            policy: Missing-reference policy, defaults to the employee policy

        Returns:
            One ProjectCost per project worked on, in project order; deleted
            projects come last as UNKNOWN_PROJECT
        """
        priced, _ = self._price_entries(entries, GroupBy.employee(employee_id), policy)

        by_project: Dict[str, List[_PricedEntry]] = defaultdict(list)
        for item in priced:
            by_project[item.entry.project_id].append(item)

        order = {project_id: i for i, project_id in enumerate(self.projects)}
        result: List[ProjectCost] = []
        for project_id, items in sorted(
            by_project.items(), key=lambda kv: (order.get(kv[0], len(order)), kv[0])
        ):
            project = self.projects.get(project_id)
            result.append(
                ProjectCost(
                    project_id=project_id,
                    project_name=project.name if project else UNKNOWN_PROJECT,
                    client=project.client if project else "",
                    total_hours=sum((i.entry.hours for i in items), Decimal("0")),
                    total_cost=sum((i.cost for i in items), Decimal("0")),
                    entry_count=len(items),
                )
            )
        return result

    def group_entries_by_date(
        self,
        entries: Iterable[TimeEntry],
        group_by: GroupBy,
        policy: Optional[MissingReferencePolicy] = None,
    ) -> List[DateGroup]:
        """Group a subject's entries by date with the cost of each date.

        Returns:
            DateGroups, most recent date first
        """
        priced, _ = self._price_entries(entries, group_by, policy)

        by_date: Dict[dt.date, List[_PricedEntry]] = defaultdict(list)
        for item in priced:
            by_date[item.entry.date].append(item)

        return [
            DateGroup(
                date=day,
                entries=[i.entry for i in items],
                total_hours=sum((i.entry.hours for i in items), Decimal("0")),
                total_cost=sum((i.cost for i in items), Decimal("0")),
            )
            for day, items in sorted(by_date.items(), reverse=True)
        ]


def aggregate(
    entries: Iterable[TimeEntry],
    employees: RecordsArg,
    projects: ProjectsArg,
    group_by: GroupBy,
    policy: Optional[MissingReferencePolicy] = None,
) -> List[WeeklyAggregate]:
    """Calculate weekly aggregates for one employee or project.

    Convenience wrapper around ``WeeklyCostAggregator.aggregate``.

    Example:
        >>> weeks = aggregate(entries, employees, projects, GroupBy.project("2"))
        >>> [w.week_start.isoformat() for w in weeks]
        ['2025-10-26']
    """
    return WeeklyCostAggregator(employees, projects).aggregate(
        entries, group_by, policy
    )


def weekly_cost_matrix(
    aggregates: Iterable[WeeklyAggregate], value: str = "total_cost"
) -> pd.DataFrame:
    """Build a subjects-by-weeks matrix from weekly aggregates.

    Args:
        aggregates: Weekly aggregates, possibly for several subjects
        value: Aggregate attribute to place in the cells

    Returns:
        DataFrame with subject ids as index and one column per week start
        label (``YYYY-MM-DD``) from the first to the last week, ascending.
        Weeks without work are NaN.
    """
    aggregates = list(aggregates)
    if not aggregates:
        logger.debug("No aggregates, returning empty DataFrame")
        return pd.DataFrame()

    matrix_data: Dict[str, Dict[str, Decimal]] = defaultdict(dict)
    for record in aggregates:
        matrix_data[record.subject_id][record.week_start.isoformat()] = getattr(
            record, value
        )

    starts = [record.week_start for record in aggregates]
    weeks = [start.isoformat() for start in iter_weeks(min(starts), max(starts))]
    df = pd.DataFrame.from_dict(matrix_data, orient="index")
    return df.reindex(weeks, axis=1)
