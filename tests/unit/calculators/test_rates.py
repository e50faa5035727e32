"""Unit tests for rate resolution and entry costs."""

from decimal import Decimal

from labor_cost.calculators.rates import (
    calculate_entry_cost,
    rate_for_type,
    resolve_entry_rate,
    resolve_rate,
)
from labor_cost.models.time_entry import TimeEntry


class TestResolveRate:
    """Test rate selection by project rate type."""

    def test_local_project_uses_local_rate(self, employee, local_project):
        assert resolve_rate(employee, local_project) == Decimal("45")

    def test_dublin_project_uses_dublin_rate(self, employee, dublin_project):
        assert resolve_rate(employee, dublin_project) == Decimal("55")

    def test_rate_for_type(self, employee):
        assert rate_for_type(employee, "local") == Decimal("45")
        assert rate_for_type(employee, "dublin") == Decimal("55")

    def test_rate_follows_current_employee_rates(self, employee, dublin_project):
        """Rates are looked up at calculation time, never stored."""
        employee.dublin_rate = Decimal("60")
        assert resolve_rate(employee, dublin_project) == Decimal("60")


class TestResolveEntryRate:
    """Test rate lookup for a single entry."""

    def make_entry(self, employee_id="1", project_id="2"):
        return TimeEntry(id="e", employeeId=employee_id, projectId=project_id, date="2025-10-28", hours=8)

    def test_resolves_from_lookup_tables(self, employee, dublin_project):
        rate = resolve_entry_rate(self.make_entry(), {"1": employee}, {"2": dublin_project})
        assert rate == Decimal("55")

    def test_missing_employee_gives_none(self, dublin_project):
        assert resolve_entry_rate(self.make_entry(), {}, {"2": dublin_project}) is None

    def test_missing_project_gives_none(self, employee):
        assert resolve_entry_rate(self.make_entry(), {"1": employee}, {}) is None


class TestCalculateEntryCost:
    """Test cost calculation."""

    def test_hours_times_rate(self):
        assert calculate_entry_cost(Decimal("8"), Decimal("55")) == Decimal("440")

    def test_fractional_cost_not_rounded(self):
        assert calculate_entry_cost(Decimal("7.25"), Decimal("45.5")) == Decimal("329.875")

    def test_missing_rate_costs_nothing(self):
        assert calculate_entry_cost(Decimal("8"), None) == Decimal("0")
