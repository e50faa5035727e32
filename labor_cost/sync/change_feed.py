"""Change notifications for tables that cannot push them, by polling."""

import logging
import threading
from typing import Callable, Dict, List, Optional

from labor_cost.models.summary import SummaryRow
from labor_cost.services.error_classifier import ErrorClassifier
from labor_cost.sync.events import ChangeCallback, ChangeEvent, ChangeType

logger = logging.getLogger(__name__)


class PollingChangeFeed:
    """Turns repeated snapshots of summary rows into change events.

    Each poll fetches the current rows and diffs them against the previous
    snapshot by row id: new ids become INSERT events, changed rows UPDATE
    events and vanished ids DELETE events. The first snapshot is a baseline
    and produces no events. A failed fetch is logged and the previous
    snapshot kept, so the next successful poll reports everything missed.

    Example:
        >>> feed = PollingChangeFeed(lambda: table.select("1"), view.apply_event)
        >>> feed.start()
        >>> ...
        >>> feed.stop()
    """

    def __init__(
        self,
        fetch: Callable[[], List[SummaryRow]],
        callback: ChangeCallback,
        interval: float = 5.0,
        name: str = "",
    ):
        """
        Initialize the feed.

        Args:
            fetch: Returns the current rows
            callback: Receives each change event
            interval: Seconds between polls
            name: Label used in the thread name and log messages
        """
        self.fetch = fetch
        self.callback = callback
        self.interval = interval
        self.name = name
        self._snapshot: Optional[Dict[str, SummaryRow]] = None
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._classifier = ErrorClassifier()

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Take the baseline snapshot and start polling in a daemon thread."""
        if self.running:
            return
        self.poll_once()
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._run, name=f"summary-feed-{self.name}", daemon=True
        )
        self._thread.start()
        logger.debug(f"Started change feed '{self.name}' every {self.interval}s")

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stop_event.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)
        self._thread = None
        logger.debug(f"Stopped change feed '{self.name}'")

    def _run(self) -> None:
        while not self._stop_event.wait(self.interval):
            self.poll_once()

    def poll_once(self) -> List[ChangeEvent]:
        """Fetch once and deliver the changes since the last snapshot.

        Returns:
            The delivered events; empty for the baseline or a failed fetch
        """
        try:
            rows = self.fetch()
        except Exception as e:
            logger.warning(
                f"Change feed '{self.name}' poll failed: "
                f"{self._classifier.describe(e)}"
            )
            return []

        current = {row.id: row for row in rows if row.id}
        if self._snapshot is None:
            self._snapshot = current
            return []

        events = diff_snapshots(self._snapshot, current)
        self._snapshot = current

        for event in events:
            try:
                self.callback(event)
            except Exception as e:
                logger.error(f"Change feed callback failed: {e}", exc_info=True)
        return events


def diff_snapshots(
    previous: Dict[str, SummaryRow], current: Dict[str, SummaryRow]
) -> List[ChangeEvent]:
    """Change events turning ``previous`` into ``current``, keyed by row id."""
    events: List[ChangeEvent] = []
    for row_id, row in current.items():
        old = previous.get(row_id)
        if old is None:
            events.append(ChangeEvent(ChangeType.INSERT, new=row))
        elif old != row:
            events.append(ChangeEvent(ChangeType.UPDATE, new=row, old=old))
    for row_id, old in previous.items():
        if row_id not in current:
            events.append(ChangeEvent(ChangeType.DELETE, old=old))
    return events
