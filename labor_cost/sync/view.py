"""Locally displayed list of weekly summary rows."""

import datetime as dt
import logging
import threading
from typing import Callable, Dict, Iterable, List, Optional

from labor_cost.models.summary import SummaryRow
from labor_cost.sync.events import ChangeEvent, ChangeType

logger = logging.getLogger(__name__)


class SummaryView:
    """Merged view of local and remote weekly summaries for one employee.

    Local aggregates are shown immediately as placeholder rows keyed by week.
    Remote rows are merged by id; a remote row replaces the placeholder of
    the same week when it arrives. The view never holds two rows with the
    same id, so an insert event echoing a row already loaded is harmless.

    Example:
        >>> view = SummaryView("1")
        >>> view.show_local(rows)
        >>> view.apply_event(event)
        >>> [r.week_start for r in view.rows()]
    """

    def __init__(
        self,
        employee_id: Optional[str] = None,
        on_change: Optional[Callable[[List[SummaryRow]], None]] = None,
    ):
        """
        Initialize the view.

        Args:
            employee_id: Employee whose rows are shown; rows of others are
                ignored
            on_change: Called with the merged rows after every change
        """
        self.employee_id = employee_id
        self.on_change = on_change
        self._remote: Dict[str, SummaryRow] = {}
        self._local: Dict[dt.date, SummaryRow] = {}
        self._lock = threading.RLock()

    def set_employee(self, employee_id: str) -> None:
        """Switch to another employee, dropping all rows of the previous one."""
        with self._lock:
            if employee_id == self.employee_id:
                return
            self.employee_id = employee_id
            self._remote.clear()
            self._local.clear()
        self._changed()

    def _accepts(self, row: SummaryRow) -> bool:
        return self.employee_id is None or row.employee_id == self.employee_id

    def show_local(self, rows: Iterable[SummaryRow]) -> None:
        """Show freshly computed rows until their remote copies arrive."""
        with self._lock:
            for row in rows:
                if self._accepts(row):
                    self._local[row.week_start] = row
        self._changed()

    def load(self, rows: Iterable[SummaryRow]) -> None:
        """Replace all remote rows with a fresh selection."""
        with self._lock:
            self._remote.clear()
            for row in rows:
                self._merge_remote(row)
        self._changed()

    def apply_event(self, event: ChangeEvent) -> None:
        """Merge a change notification into the view."""
        with self._lock:
            if not self._accepts(event.row):
                return
            if event.event_type is ChangeType.DELETE:
                self._remote.pop(event.old.id, None)
            else:
                self._merge_remote(event.new)
        logger.debug(
            f"Applied {event.event_type.value} for week {event.row.week_start}"
        )
        self._changed()

    def _merge_remote(self, row: SummaryRow) -> None:
        if not row.id or not self._accepts(row):
            return
        self._remote[row.id] = row
        self._local.pop(row.week_start, None)

    def rows(self) -> List[SummaryRow]:
        """Rows to display, most recent week first."""
        with self._lock:
            merged = [
                row for row in self._remote.values() if row.week_start not in self._local
            ]
            merged.extend(self._local.values())
        return sorted(merged, key=lambda r: r.week_start, reverse=True)

    @property
    def pending_weeks(self) -> List[dt.date]:
        """Weeks still shown from local placeholders."""
        with self._lock:
            return sorted(self._local, reverse=True)

    def clear(self) -> None:
        with self._lock:
            self._remote.clear()
            self._local.clear()
        self._changed()

    def _changed(self) -> None:
        if self.on_change is not None:
            self.on_change(self.rows())
