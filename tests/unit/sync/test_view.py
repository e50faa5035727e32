"""Unit tests for the summary view."""

import datetime as dt
from unittest.mock import Mock

from labor_cost.sync.events import ChangeEvent, ChangeType
from labor_cost.sync.view import SummaryView


class TestSummaryView:
    """Test merging local and remote rows."""

    def test_local_rows_shown_until_remote_arrives(self, row_factory):
        view = SummaryView("1")
        view.show_local([row_factory()])

        assert view.pending_weeks == [dt.date(2025, 10, 26)]

        view.apply_event(ChangeEvent(ChangeType.INSERT, new=row_factory(row_id="r1")))

        assert view.pending_weeks == []
        assert [r.id for r in view.rows()] == ["r1"]

    def test_echoed_insert_not_duplicated(self, row_factory):
        """An insert event for a row already loaded leaves one row."""
        row = row_factory(row_id="r1")
        view = SummaryView("1")
        view.load([row])

        view.apply_event(ChangeEvent(ChangeType.INSERT, new=row))

        assert view.rows() == [row]

    def test_update_replaces_by_id(self, row_factory):
        view = SummaryView("1")
        view.load([row_factory(row_id="r1")])
        newer = row_factory(hours=14, cost=770, entries=3, row_id="r1")

        view.apply_event(ChangeEvent(ChangeType.UPDATE, new=newer, old=row_factory(row_id="r1")))

        assert view.rows() == [newer]

    def test_delete_removes_row(self, row_factory):
        row = row_factory(row_id="r1")
        view = SummaryView("1")
        view.load([row])

        view.apply_event(ChangeEvent(ChangeType.DELETE, old=row))

        assert view.rows() == []

    def test_other_employee_ignored(self, row_factory):
        view = SummaryView("1")

        view.apply_event(ChangeEvent(ChangeType.INSERT, new=row_factory(employee_id="2", row_id="x")))

        assert view.rows() == []

    def test_rows_sorted_most_recent_first(self, row_factory):
        view = SummaryView("1")
        view.load([row_factory(week_start=dt.date(2025, 10, 12), row_id="old")])
        view.show_local([row_factory(week_start=dt.date(2025, 11, 2))])

        assert [r.week_start for r in view.rows()] == [dt.date(2025, 11, 2), dt.date(2025, 10, 12)]

    def test_set_employee_clears_rows(self, row_factory):
        view = SummaryView("1")
        view.load([row_factory(row_id="r1")])

        view.set_employee("2")

        assert view.rows() == []
        assert view.employee_id == "2"

    def test_on_change_receives_rows(self, row_factory):
        on_change = Mock()
        view = SummaryView("1", on_change=on_change)

        view.load([row_factory(row_id="r1")])

        on_change.assert_called_with([row_factory(row_id="r1")])
