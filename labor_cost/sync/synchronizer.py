"""Mirrors locally computed weekly aggregates to a remote summary table.

Publishing never blocks the caller: each week becomes one upsert submitted
to a thread pool. Every outcome, success or failure, is reported as a
``SyncResult``. A failed write is logged and reported but not re-issued;
transient transport errors are already retried inside the Sheets service.
"""

import datetime as dt
import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Optional

from labor_cost.aggregators.weekly_cost_aggregator import WeeklyAggregate
from labor_cost.models.summary import SummaryRow
from labor_cost.services.error_classifier import ErrorClassifier
from labor_cost.sync.events import Subscription
from labor_cost.sync.summary_table import SummaryTable
from labor_cost.sync.view import SummaryView
from labor_cost.utils.logging_utils import LogContext, generate_correlation_id

logger = logging.getLogger(__name__)


@dataclass
class SyncResult:
    """Outcome of one summary upsert.

    Attributes:
        employee_id: Employee of the row
        week_start: Week of the row
        success: Whether the remote table accepted the row
        row: Stored row with its remote id, on success
        error: Error description, on failure
        finished_at: When the attempt completed
    """

    employee_id: str
    week_start: dt.date
    success: bool
    row: Optional[SummaryRow] = None
    error: Optional[str] = None
    finished_at: dt.datetime = field(default_factory=dt.datetime.now)


def summary_row_from_aggregate(aggregate: WeeklyAggregate) -> SummaryRow:
    """Convert an employee's weekly aggregate to a summary row.

    Raises:
        ValueError: If the aggregate is not for an employee
    """
    if aggregate.subject != "employee":
        raise ValueError(
            f"Only employee aggregates are mirrored, got {aggregate.subject}"
        )
    return SummaryRow(
        employee_id=aggregate.subject_id,
        week_start=aggregate.week_start,
        week_end=aggregate.week_end,
        total_hours=aggregate.total_hours,
        total_cost=aggregate.total_cost,
        entries=aggregate.entry_count,
    )


class SummarySynchronizer:
    """Publishes weekly aggregates and keeps a view in step with the table.

    Example:
        >>> with SummarySynchronizer(table, on_result=print) as sync:
        ...     view = SummaryView()
        ...     sync.watch("1", view)
        ...     futures = sync.publish("1", aggregates)
    """

    def __init__(
        self,
        table: SummaryTable,
        max_workers: int = 4,
        on_result: Optional[Callable[[SyncResult], None]] = None,
    ):
        """
        Initialize the synchronizer.

        Args:
            table: Remote summary table
            max_workers: Size of the upsert thread pool
            on_result: Called with each SyncResult, from a worker thread
        """
        self.table = table
        self.on_result = on_result
        self.results: List[SyncResult] = []
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="summary-sync"
        )
        self._classifier = ErrorClassifier()
        self._lock = threading.Lock()
        self._subscription: Optional[Subscription] = None
        self._watched: Optional[str] = None

    # ---------------------------------------------------------------- publish

    def publish(
        self, employee_id: str, aggregates: Iterable[WeeklyAggregate]
    ) -> List[Future]:
        """Submit one upsert per week of an employee without waiting.

        Aggregates of other subjects are ignored.

        Returns:
            Futures resolving to SyncResult, in aggregate order
        """
        correlation_id = generate_correlation_id()
        futures = []
        for aggregate in aggregates:
            if aggregate.subject != "employee" or aggregate.subject_id != employee_id:
                continue
            row = summary_row_from_aggregate(aggregate)
            futures.append(self._executor.submit(self._upsert, row, correlation_id))

        logger.info(
            f"Queued {len(futures)} weekly summaries for employee {employee_id}"
        )
        return futures

    def _upsert(self, row: SummaryRow, correlation_id: str) -> SyncResult:
        with LogContext(
            correlation_id=correlation_id,
            employee_id=row.employee_id,
            week_start=row.week_start.isoformat(),
        ):
            try:
                stored = self.table.upsert(row)
            except Exception as e:
                description = self._classifier.describe(e)
                logger.error(
                    f"Failed to publish summary for employee {row.employee_id}, "
                    f"week {row.week_start}: {description}"
                )
                result = SyncResult(
                    employee_id=row.employee_id,
                    week_start=row.week_start,
                    success=False,
                    error=description,
                )
            else:
                logger.debug(f"Published summary row {stored.id}")
                result = SyncResult(
                    employee_id=row.employee_id,
                    week_start=row.week_start,
                    success=True,
                    row=stored,
                )

            self._report(result)
            return result

    def _report(self, result: SyncResult) -> None:
        with self._lock:
            self.results.append(result)
        if self.on_result is None:
            return
        try:
            self.on_result(result)
        except Exception as e:
            logger.error(f"Sync result callback failed: {e}", exc_info=True)

    @property
    def failures(self) -> List[SyncResult]:
        with self._lock:
            return [r for r in self.results if not r.success]

    # ------------------------------------------------------------------ watch

    @property
    def watched_employee(self) -> Optional[str]:
        return self._watched

    def watch(self, employee_id: str, view: SummaryView) -> Subscription:
        """Load an employee's remote rows into ``view`` and follow changes.

        Watching another employee releases the previous subscription first.
        A failed initial load is logged; the subscription is still made so
        that later changes arrive.

        Returns:
            The active subscription
        """
        with self._lock:
            if self._subscription is not None and self._subscription.active:
                if self._watched == employee_id:
                    return self._subscription
                self._subscription.unsubscribe()
                logger.debug(f"Stopped watching employee {self._watched}")
            self._subscription = None
            self._watched = employee_id

        view.set_employee(employee_id)
        try:
            view.load(self.table.select(employee_id))
        except Exception as e:
            logger.warning(
                f"Could not load remote summaries for employee {employee_id}: "
                f"{self._classifier.describe(e)}"
            )

        subscription = self.table.subscribe(view.apply_event, employee_id=employee_id)
        with self._lock:
            self._subscription = subscription
        logger.info(f"Watching weekly summaries of employee {employee_id}")
        return subscription

    def unwatch(self) -> None:
        with self._lock:
            subscription, self._subscription = self._subscription, None
            self._watched = None
        if subscription is not None:
            subscription.unsubscribe()

    # -------------------------------------------------------------- lifecycle

    def close(self, wait: bool = True) -> None:
        """Release the subscription and shut the worker pool down."""
        self.unwatch()
        self._executor.shutdown(wait=wait)
        stats = self._classifier.get_statistics()
        if stats["total"]:
            failures = {k: v for k, v in stats.items() if v and k != "total"}
            logger.info(f"Summary sync errors this session: {failures}")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
