"""Unit tests for summary tables."""

import datetime as dt
from decimal import Decimal
from unittest.mock import Mock

import pytest

from labor_cost.errors import RecordNotFoundError
from labor_cost.models.summary import SUMMARY_COLUMNS
from labor_cost.sync.events import ChangeType
from labor_cost.sync.summary_table import InMemorySummaryTable, SheetsSummaryTable, sort_rows


class TestInMemorySummaryTable:
    """Test the in-process table."""

    def test_insert_assigns_id(self, row_factory):
        table = InMemorySummaryTable()

        stored = table.upsert(row_factory())

        assert stored.id
        assert table.select("1") == [stored]

    def test_upsert_same_key_keeps_id(self, row_factory):
        table = InMemorySummaryTable()
        first = table.upsert(row_factory())

        second = table.upsert(row_factory(hours=14, cost=770, entries=3))

        assert second.id == first.id
        assert table.select("1") == [second]
        assert table.select("1")[0].total_cost == Decimal("770")

    def test_select_filters_and_sorts(self, row_factory):
        table = InMemorySummaryTable()
        table.upsert(row_factory(week_start=dt.date(2025, 10, 12)))
        table.upsert(row_factory(week_start=dt.date(2025, 10, 26)))
        table.upsert(row_factory(employee_id="2"))

        weeks = [r.week_start for r in table.select("1")]

        assert weeks == [dt.date(2025, 10, 26), dt.date(2025, 10, 12)]

    def test_events_carry_full_row_state(self, row_factory):
        table = InMemorySummaryTable()
        events = []
        table.subscribe(events.append)

        inserted = table.upsert(row_factory())
        updated = table.upsert(row_factory(hours=1, cost=55, entries=1))
        table.delete(updated.id)

        assert [e.event_type for e in events] == [ChangeType.INSERT, ChangeType.UPDATE, ChangeType.DELETE]
        assert events[0].new == inserted
        assert events[1].old == inserted
        assert events[1].new == updated
        assert events[2].old == updated and events[2].new is None

    def test_subscription_filtered_by_employee(self, row_factory):
        table = InMemorySummaryTable()
        callback = Mock()
        table.subscribe(callback, employee_id="2")

        table.upsert(row_factory(employee_id="1"))
        table.upsert(row_factory(employee_id="2"))

        assert callback.call_count == 1
        assert callback.call_args.args[0].employee_id == "2"

    def test_unsubscribe_stops_events(self, row_factory):
        table = InMemorySummaryTable()
        callback = Mock()
        subscription = table.subscribe(callback)

        subscription.unsubscribe()
        subscription.unsubscribe()
        table.upsert(row_factory())

        callback.assert_not_called()
        assert not subscription.active
        assert table.subscriber_count == 0

    def test_failing_subscriber_does_not_break_upsert(self, row_factory):
        table = InMemorySummaryTable()
        good = Mock()
        table.subscribe(Mock(side_effect=RuntimeError("boom")))
        table.subscribe(good)

        table.upsert(row_factory())

        good.assert_called_once()

    def test_delete_unknown_row(self):
        with pytest.raises(RecordNotFoundError):
            InMemorySummaryTable().delete("missing")

    def test_sort_rows(self, row_factory):
        rows = [row_factory(week_start=dt.date(2025, 10, 12)), row_factory()]
        assert sort_rows(rows)[0].week_start == dt.date(2025, 10, 26)


class TestSheetsSummaryTable:
    """Test the Google Sheets backed table."""

    def test_creates_tab_and_header(self, fake_sheets):
        table = SheetsSummaryTable(fake_sheets, "sheet-id")

        table.ensure_sheet()

        assert ("create_sheet", "weekly_summaries") in fake_sheets.calls
        assert fake_sheets.values[0] == SUMMARY_COLUMNS

    def test_existing_header_kept(self, sheets_factory):
        sheets = sheets_factory(titles=["weekly_summaries"], values=[SUMMARY_COLUMNS])
        table = SheetsSummaryTable(sheets, "sheet-id")

        table.ensure_sheet()

        assert sheets.calls == []

    def test_insert_appends_row(self, fake_sheets, row_factory):
        table = SheetsSummaryTable(fake_sheets, "sheet-id")

        stored = table.upsert(row_factory())

        assert ("append_values", "weekly_summaries!A:G") in fake_sheets.calls
        assert fake_sheets.values[1][0] == stored.id
        assert table.select("1") == [stored]

    def test_update_rewrites_row_in_place(self, fake_sheets, row_factory):
        table = SheetsSummaryTable(fake_sheets, "sheet-id")
        first = table.upsert(row_factory())

        second = table.upsert(row_factory(hours=14, cost=770, entries=3))

        assert second.id == first.id
        assert ("update_values", "weekly_summaries!A2:G2") in fake_sheets.calls
        assert len(fake_sheets.values) == 2
        assert table.select("1")[0].total_cost == Decimal("770")

    def test_delete_blanks_row(self, fake_sheets, row_factory):
        table = SheetsSummaryTable(fake_sheets, "sheet-id")
        stored = table.upsert(row_factory())

        table.delete(stored.id)

        assert table.select("1") == []
        with pytest.raises(RecordNotFoundError):
            table.delete(stored.id)

    def test_malformed_rows_skipped(self, sheets_factory):
        sheets = sheets_factory(
            titles=["weekly_summaries"],
            values=[
                SUMMARY_COLUMNS,
                ["a", "1", "2025-10-26", "2025-11-01", "12", "660", "2"],
                ["b", "1", "not a date", "", "", "", ""],
                ["c", "2", "2025-10-26", "2025-11-01", "4", ""],
            ],
        )
        table = SheetsSummaryTable(sheets, "sheet-id")

        rows = table.all_rows()

        assert [r.id for r in rows] == ["a", "c"]
        assert rows[1].total_cost == Decimal("0")
        assert rows[1].entries == 0

    def test_subscribe_starts_polling_feed(self, fake_sheets, row_factory):
        table = SheetsSummaryTable(fake_sheets, "sheet-id", poll_interval=60)

        subscription = table.subscribe(Mock(), employee_id="1")
        try:
            assert subscription.active
        finally:
            subscription.unsubscribe()

        assert not subscription.active
