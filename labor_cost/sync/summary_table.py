"""Remote weekly summary tables.

A summary table stores one row per (employee, week). Rows are upserted by
that key, selected per employee, and changes are pushed to subscribers as
``ChangeEvent`` objects carrying the full new and old row state.

Two implementations are provided:

- ``InMemorySummaryTable``: process-local table with synchronous
  notifications, used in tests and when remote sync is disabled
- ``SheetsSummaryTable``: rows kept in a Google Sheets tab; subscribers are
  fed by a ``PollingChangeFeed``
"""

import logging
import threading
import uuid
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Tuple

from pydantic import ValidationError

from labor_cost.errors import RecordNotFoundError
from labor_cost.models.summary import SUMMARY_COLUMNS, SummaryRow
from labor_cost.services.google_sheets_service import GoogleSheetsService
from labor_cost.sync.change_feed import PollingChangeFeed
from labor_cost.sync.events import (
    ChangeCallback,
    ChangeEvent,
    ChangeType,
    Subscription,
)

logger = logging.getLogger(__name__)


def new_row_id() -> str:
    return uuid.uuid4().hex


def sort_rows(rows: List[SummaryRow]) -> List[SummaryRow]:
    """Rows ordered by week start, most recent first."""
    return sorted(rows, key=lambda r: r.week_start, reverse=True)


class SummaryTable(ABC):
    """Interface of a weekly summary table."""

    @abstractmethod
    def upsert(self, row: SummaryRow) -> SummaryRow:
        """Insert or replace the row with the same (employee_id, week_start).

        Returns:
            The stored row, carrying its table-assigned ``id``

        Raises:
            SyncError: If the table cannot be written
        """

    @abstractmethod
    def select(self, employee_id: str) -> List[SummaryRow]:
        """All rows of an employee, most recent week first."""

    @abstractmethod
    def delete(self, row_id: str) -> None:
        """Delete a row by id.

        Raises:
            RecordNotFoundError: If no row has this id
        """

    @abstractmethod
    def subscribe(
        self, callback: ChangeCallback, employee_id: Optional[str] = None
    ) -> Subscription:
        """Receive change events, optionally only for one employee."""


class InMemorySummaryTable(SummaryTable):
    """Thread-safe in-process summary table.

    Notifications are delivered synchronously on the writing thread, after
    the table lock is released.

    Example:
        >>> table = InMemorySummaryTable()
        >>> stored = table.upsert(row)
        >>> table.select(row.employee_id) == [stored]
        True
    """

    def __init__(self):
        self._rows: Dict[str, SummaryRow] = {}
        self._ids_by_key: Dict[tuple, str] = {}
        self._subscribers: Dict[int, Tuple[ChangeCallback, Optional[str]]] = {}
        self._next_token = 0
        self._lock = threading.RLock()

    def upsert(self, row: SummaryRow) -> SummaryRow:
        with self._lock:
            row_id = self._ids_by_key.get(row.key)
            old = self._rows.get(row_id) if row_id else None
            stored = row.model_copy(update={"id": row_id or new_row_id()})
            self._rows[stored.id] = stored
            self._ids_by_key[stored.key] = stored.id

        if old is None:
            self._notify(ChangeEvent(ChangeType.INSERT, new=stored))
        else:
            self._notify(ChangeEvent(ChangeType.UPDATE, new=stored, old=old))
        return stored

    def select(self, employee_id: str) -> List[SummaryRow]:
        with self._lock:
            rows = [r for r in self._rows.values() if r.employee_id == employee_id]
        return sort_rows(rows)

    def delete(self, row_id: str) -> None:
        with self._lock:
            old = self._rows.pop(row_id, None)
            if old is None:
                raise RecordNotFoundError("summary row", row_id)
            self._ids_by_key.pop(old.key, None)
        self._notify(ChangeEvent(ChangeType.DELETE, old=old))

    def subscribe(
        self, callback: ChangeCallback, employee_id: Optional[str] = None
    ) -> Subscription:
        with self._lock:
            token = self._next_token
            self._next_token += 1
            self._subscribers[token] = (callback, employee_id)

        def release():
            with self._lock:
                self._subscribers.pop(token, None)

        return Subscription(release, description=f"in-memory:{employee_id or '*'}")

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)

    def _notify(self, event: ChangeEvent) -> None:
        with self._lock:
            subscribers = list(self._subscribers.values())
        for callback, employee_id in subscribers:
            if employee_id is not None and event.employee_id != employee_id:
                continue
            try:
                callback(event)
            except Exception as e:
                logger.error(f"Summary change subscriber failed: {e}", exc_info=True)


class SheetsSummaryTable(SummaryTable):
    """Summary table stored in a Google Sheets tab.

    The tab holds a header row with ``SUMMARY_COLUMNS`` followed by one row
    per (employee, week). Deleted rows are blanked rather than removed so
    that row numbers stay stable. Writes from this process are serialized;
    the (employee_id, week_start) key is only unique as long as no other
    writer appends the same key concurrently.
    """

    def __init__(
        self,
        sheets: GoogleSheetsService,
        spreadsheet_id: str,
        sheet_name: str = "weekly_summaries",
        poll_interval: float = 5.0,
    ):
        """
        Initialize the table.

        Args:
            sheets: Sheets service used for all reads and writes
            spreadsheet_id: Spreadsheet holding the summary tab
            sheet_name: Title of the summary tab
            poll_interval: Seconds between polls for subscribers
        """
        self.sheets = sheets
        self.spreadsheet_id = spreadsheet_id
        self.sheet_name = sheet_name
        self.poll_interval = poll_interval
        self._ready = False
        self._write_lock = threading.Lock()

    @property
    def range_name(self) -> str:
        return f"{self.sheet_name}!A:G"

    def _row_range(self, row_number: int) -> str:
        return f"{self.sheet_name}!A{row_number}:G{row_number}"

    def ensure_sheet(self) -> None:
        """Create the summary tab and its header row when missing."""
        if self._ready:
            return

        if self.sheet_name not in self.sheets.get_sheet_titles(self.spreadsheet_id):
            logger.info(f"Creating summary sheet '{self.sheet_name}'")
            self.sheets.create_sheet(self.spreadsheet_id, self.sheet_name)

        values = self.sheets.read_values(self.spreadsheet_id, f"{self.sheet_name}!A1:G1")
        header = [str(v) for v in values[0]] if values else []
        if header != SUMMARY_COLUMNS:
            if header:
                logger.warning(
                    f"Unexpected header in '{self.sheet_name}', rewriting it"
                )
            self.sheets.update_values(
                self.spreadsheet_id, self._row_range(1), [SUMMARY_COLUMNS]
            )
        self._ready = True

    def _read_rows(self) -> List[Tuple[int, SummaryRow]]:
        """All valid rows with their 1-based sheet row numbers."""
        self.ensure_sheet()
        values = self.sheets.read_values(self.spreadsheet_id, self.range_name)

        rows: List[Tuple[int, SummaryRow]] = []
        for row_number, raw in enumerate(values[1:], start=2):
            if not any(str(cell).strip() for cell in raw):
                continue
            padded = list(raw) + [""] * (len(SUMMARY_COLUMNS) - len(raw))
            record = dict(zip(SUMMARY_COLUMNS, padded))
            try:
                rows.append((row_number, SummaryRow.model_validate(record)))
            except ValidationError as e:
                logger.warning(
                    f"Skipping malformed summary row {row_number}: "
                    f"{e.error_count()} validation error(s)"
                )
        return rows

    def all_rows(self) -> List[SummaryRow]:
        return sort_rows([row for _, row in self._read_rows()])

    def upsert(self, row: SummaryRow) -> SummaryRow:
        with self._write_lock:
            existing = next(
                ((n, r) for n, r in self._read_rows() if r.key == row.key), None
            )
            if existing is not None:
                row_number, current = existing
                stored = row.model_copy(update={"id": current.id or new_row_id()})
                self.sheets.update_values(
                    self.spreadsheet_id,
                    self._row_range(row_number),
                    [stored.to_sheet_values()],
                )
            else:
                stored = row.model_copy(update={"id": new_row_id()})
                self.sheets.append_values(
                    self.spreadsheet_id, self.range_name, [stored.to_sheet_values()]
                )

        logger.debug(
            f"Upserted summary {stored.employee_id}/{stored.week_start} as {stored.id}"
        )
        return stored

    def select(self, employee_id: str) -> List[SummaryRow]:
        return [r for r in self.all_rows() if r.employee_id == employee_id]

    def delete(self, row_id: str) -> None:
        with self._write_lock:
            match = next((n for n, r in self._read_rows() if r.id == row_id), None)
            if match is None:
                raise RecordNotFoundError("summary row", row_id)
            self.sheets.update_values(
                self.spreadsheet_id,
                self._row_range(match),
                [[""] * len(SUMMARY_COLUMNS)],
            )

    def subscribe(
        self, callback: ChangeCallback, employee_id: Optional[str] = None
    ) -> Subscription:
        if employee_id is None:
            fetch = self.all_rows
        else:

            def fetch():
                return self.select(employee_id)

        feed = PollingChangeFeed(
            fetch, callback, interval=self.poll_interval, name=employee_id or "*"
        )
        feed.start()
        return Subscription(feed.stop, description=f"sheets:{employee_id or '*'}")
