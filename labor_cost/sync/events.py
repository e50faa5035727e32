"""Change events and subscription handles for summary tables."""

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from labor_cost.models.summary import SummaryRow

logger = logging.getLogger(__name__)


class ChangeType(Enum):
    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


@dataclass(frozen=True)
class ChangeEvent:
    """A change to one summary row.

    Attributes:
        event_type: INSERT, UPDATE or DELETE
        new: Row state after the change (None for DELETE)
        old: Row state before the change (None for INSERT)
    """

    event_type: ChangeType
    new: Optional[SummaryRow] = None
    old: Optional[SummaryRow] = None

    @property
    def row(self) -> SummaryRow:
        """The row the event is about."""
        return self.new if self.new is not None else self.old

    @property
    def employee_id(self) -> str:
        return self.row.employee_id


ChangeCallback = Callable[[ChangeEvent], None]


class Subscription:
    """Handle for a change subscription. ``unsubscribe`` is idempotent."""

    def __init__(self, release: Callable[[], None], description: str = ""):
        self._release = release
        self._active = True
        self._lock = threading.Lock()
        self.description = description

    @property
    def active(self) -> bool:
        return self._active

    def unsubscribe(self) -> None:
        with self._lock:
            if not self._active:
                return
            self._active = False
        self._release()
        logger.debug(f"Released subscription {self.description}")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.unsubscribe()
