"""Fixtures for exporter tests."""

import pytest

from labor_cost.aggregators.weekly_cost_aggregator import GroupBy, WeeklyCostAggregator
from labor_cost.models.time_entry import TimeEntry


@pytest.fixture
def timesheet(employee, local_project, dublin_project):
    """Week of 26 Oct 2025: 8h local on Tuesday, 4h Dublin on Wednesday."""
    entries = [
        TimeEntry(id="b", employeeId="1", projectId="2", date="2025-10-29", hours=4),
        TimeEntry(id="a", employeeId="1", projectId="1", date="2025-10-28", hours=8),
    ]
    aggregator = WeeklyCostAggregator([employee], [local_project, dublin_project])
    return aggregator.build_weekly_timesheets(entries, GroupBy.employee("1"))[0]
