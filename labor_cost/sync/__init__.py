"""Remote mirroring of weekly employee summaries."""

from .change_feed import PollingChangeFeed, diff_snapshots
from .events import ChangeCallback, ChangeEvent, ChangeType, Subscription
from .summary_table import (
    InMemorySummaryTable,
    SheetsSummaryTable,
    SummaryTable,
    sort_rows,
)
from .publisher import RepositoryPublisher
from .synchronizer import SummarySynchronizer, SyncResult, summary_row_from_aggregate
from .view import SummaryView

__all__ = [
    "ChangeCallback",
    "ChangeEvent",
    "ChangeType",
    "Subscription",
    "PollingChangeFeed",
    "diff_snapshots",
    "SummaryTable",
    "InMemorySummaryTable",
    "SheetsSummaryTable",
    "sort_rows",
    "RepositoryPublisher",
    "SummarySynchronizer",
    "SyncResult",
    "summary_row_from_aggregate",
    "SummaryView",
]
