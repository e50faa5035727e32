"""Unit tests for the labor cost repository."""

import datetime as dt
import json
from decimal import Decimal
from unittest.mock import Mock

import pytest

from labor_cost.errors import RecordNotFoundError
from labor_cost.storage.kv_store import InMemoryKeyValueStore
from labor_cost.storage.record_store import (
    EMPLOYEES_KEY,
    PROJECTS_KEY,
    TIME_ENTRIES_KEY,
    RecordStore,
)
from labor_cost.storage.repository import LaborCostRepository, generate_id


@pytest.fixture
def kv():
    return InMemoryKeyValueStore()


@pytest.fixture
def repo(kv):
    return LaborCostRepository(RecordStore(kv))


class TestEmployees:
    """Test employee operations."""

    def test_generate_id_unique(self):
        assert generate_id() != generate_id()

    def test_add_employee_defaults_dublin_rate(self, repo):
        employee = repo.add_employee("Ann Lee", "Plumber", local_rate=50)

        assert employee.dublin_rate == Decimal("60")
        assert repo.get_employee(employee.id) == employee

    def test_add_employee_persists(self, repo, kv):
        employee = repo.add_employee("Ann Lee", "Plumber", local_rate=50, dublin_rate=70)

        stored = json.loads(kv.get(EMPLOYEES_KEY))
        assert stored[-1]["id"] == employee.id
        assert stored[-1]["dublinRate"] == "70"

    def test_update_employee_rates(self, repo):
        updated = repo.update_employee("1", local_rate=Decimal("48"), name=None)

        assert updated.local_rate == Decimal("48")
        assert updated.name == "John Smith"
        assert repo.get_employee("1").local_rate == Decimal("48")

    def test_update_unknown_field(self, repo):
        with pytest.raises(ValueError):
            repo.update_employee("1", colour="blue")

    def test_update_missing_employee(self, repo):
        with pytest.raises(RecordNotFoundError) as exc_info:
            repo.update_employee("nope", name="X")

        assert exc_info.value.kind == "employee"

    def test_delete_employee_keeps_entries(self, repo):
        entries_before = len(repo.time_entries)

        repo.delete_employee("1")

        assert repo.find_employee("1") is None
        assert len(repo.time_entries) == entries_before

    def test_rate_change_recosts_existing_entries(self, repo):
        """Rates are resolved when aggregating, so history follows the new rate."""
        from labor_cost.aggregators.weekly_cost_aggregator import GroupBy

        before = repo.aggregator().calculate_totals(repo.time_entries, GroupBy.employee("1"))
        repo.update_employee("1", dublin_rate=65)
        after = repo.aggregator().calculate_totals(repo.time_entries, GroupBy.employee("1"))

        # seed employee 1 logged 4h on the Dublin project
        assert after.total_cost - before.total_cost == Decimal("40")


class TestProjects:
    """Test project operations."""

    def test_add_project_defaults(self, repo):
        project = repo.add_project("Attic", "Doyle")

        assert project.status == "active"
        assert project.rate_type == "local"
        assert repo.get_project(project.id).name == "Attic"

    def test_update_project_rate_type(self, repo, kv):
        repo.update_project("1", rate_type="dublin")

        assert repo.get_project("1").rate_type == "dublin"
        assert json.loads(kv.get(PROJECTS_KEY))[0]["rateType"] == "dublin"

    def test_invalid_status_rejected(self, repo):
        from pydantic import ValidationError

        with pytest.raises(ValidationError):
            repo.update_project("1", status="archived")

        assert repo.get_project("1").status == "active"

    def test_get_missing_project(self, repo):
        with pytest.raises(RecordNotFoundError):
            repo.get_project("missing")


class TestLogTime:
    """Test logging time."""

    def test_log_time_for_several_employees(self, repo):
        entries = repo.log_time("2", dt.date(2025, 11, 3), [("1", 8), ("2", Decimal("6.5"))])

        assert [e.employee_id for e in entries] == ["1", "2"]
        assert all(e.project_id == "2" for e in entries)
        assert entries[1].hours == Decimal("6.5")
        assert repo.entries_for_project("2")[-2:] == entries

    def test_zero_and_blank_assignments_dropped(self, repo, kv):
        before = kv.get(TIME_ENTRIES_KEY)

        entries = repo.log_time("1", dt.date(2025, 11, 3), [("1", 0), ("", 4), ("2", -1)])

        assert entries == []
        assert kv.get(TIME_ENTRIES_KEY) == before

    def test_unknown_project(self, repo):
        with pytest.raises(RecordNotFoundError) as exc_info:
            repo.log_time("nope", dt.date(2025, 11, 3), [("1", 8)])

        assert exc_info.value.kind == "project"

    def test_unknown_employee(self, repo):
        with pytest.raises(RecordNotFoundError):
            repo.log_time("1", dt.date(2025, 11, 3), [("ghost", 8)])

    def test_entries_for_employee(self, repo):
        assert {e.id for e in repo.entries_for_employee("1")} == {"1", "3"}

    def test_lists_are_copies(self, repo):
        repo.time_entries.clear()

        assert repo.time_entries


class TestListeners:
    """Test change notification."""

    def test_listener_called_with_key(self, repo):
        listener = Mock()
        repo.add_listener(listener)

        repo.log_time("1", dt.date(2025, 11, 3), [("1", 2)])
        repo.add_project("Attic", "Doyle")

        assert [c.args[0] for c in listener.call_args_list] == [TIME_ENTRIES_KEY, PROJECTS_KEY]

    def test_removed_listener_not_called(self, repo):
        listener = Mock()
        repo.add_listener(listener)
        repo.remove_listener(listener)

        repo.add_project("Attic", "Doyle")

        listener.assert_not_called()

    def test_no_notification_when_nothing_logged(self, repo):
        listener = Mock()
        repo.add_listener(listener)

        repo.log_time("1", dt.date(2025, 11, 3), [("1", 0)])

        listener.assert_not_called()

    def test_reloaded_repository_sees_changes(self, repo, kv):
        employee = repo.add_employee("Ann Lee", "Plumber", local_rate=50)

        reloaded = LaborCostRepository(RecordStore(kv))

        assert reloaded.get_employee(employee.id).dublin_rate == Decimal("60")
