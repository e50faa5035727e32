"""Fixtures for summary sync tests."""

import datetime as dt
from decimal import Decimal

import pytest

from labor_cost.models.summary import SummaryRow


def make_row(employee_id="1", week_start=dt.date(2025, 10, 26), hours=12, cost=660, entries=2, row_id=None):
    return SummaryRow(
        id=row_id,
        employee_id=employee_id,
        week_start=week_start,
        week_end=week_start + dt.timedelta(days=6),
        total_hours=Decimal(str(hours)),
        total_cost=Decimal(str(cost)),
        entries=entries,
    )


@pytest.fixture
def row_factory():
    return make_row


class FakeSheets:
    """In-memory stand-in for GoogleSheetsService holding one tab."""

    def __init__(self, titles=None, values=None):
        self.titles = list(titles or [])
        self.values = [list(r) for r in (values or [])]
        self.calls = []

    def get_sheet_titles(self, spreadsheet_id):
        return list(self.titles)

    def create_sheet(self, spreadsheet_id, title):
        self.calls.append(("create_sheet", title))
        self.titles.append(title)

    def read_values(self, spreadsheet_id, range_name):
        if range_name.endswith("A1:G1"):
            return [list(self.values[0])] if self.values else []
        return [list(r) for r in self.values]

    def update_values(self, spreadsheet_id, range_name, values):
        self.calls.append(("update_values", range_name))
        row_number = int(range_name.split("!A")[1].split(":")[0])
        while len(self.values) < row_number:
            self.values.append([])
        self.values[row_number - 1] = list(values[0])

    def append_values(self, spreadsheet_id, range_name, values):
        self.calls.append(("append_values", range_name))
        self.values.extend(list(v) for v in values)


@pytest.fixture
def fake_sheets():
    return FakeSheets()


@pytest.fixture
def sheets_factory():
    """Build a FakeSheets with preset tabs and values."""
    return FakeSheets
