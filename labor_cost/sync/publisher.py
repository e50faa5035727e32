"""Republishes weekly summaries whenever repository records change."""

import logging
from concurrent.futures import Future, wait
from typing import List, Optional

from labor_cost.aggregators.weekly_cost_aggregator import GroupBy
from labor_cost.storage.repository import LaborCostRepository
from labor_cost.sync.synchronizer import SummarySynchronizer, SyncResult

logger = logging.getLogger(__name__)


class RepositoryPublisher:
    """Repository change listener that mirrors employee summaries.

    On every change the weekly aggregates of each known employee are
    recomputed and handed to the synchronizer. Publishing does not block;
    ``wait`` collects the outcomes when the caller needs them.

    Example:
        >>> publisher = RepositoryPublisher(repository, synchronizer).attach()
        >>> repository.log_time("1", date, [("1", 8)])
        >>> publisher.wait()
    """

    def __init__(self, repository: LaborCostRepository, synchronizer: SummarySynchronizer):
        self.repository = repository
        self.synchronizer = synchronizer
        self.pending: List[Future] = []

    def attach(self) -> "RepositoryPublisher":
        self.repository.add_listener(self.on_change)
        return self

    def detach(self) -> None:
        self.repository.remove_listener(self.on_change)

    def on_change(self, key: str) -> None:
        logger.debug(f"Records '{key}' changed, republishing weekly summaries")
        self.publish_all()

    def publish_employee(self, employee_id: str) -> List[Future]:
        aggregator = self.repository.aggregator()
        aggregates = aggregator.aggregate(
            self.repository.time_entries, GroupBy.employee(employee_id)
        )
        futures = self.synchronizer.publish(employee_id, aggregates)
        self.pending.extend(futures)
        return futures

    def publish_all(self) -> List[Future]:
        futures: List[Future] = []
        for employee in self.repository.employees:
            futures.extend(self.publish_employee(employee.id))
        return futures

    def wait(self, timeout: Optional[float] = None) -> List[SyncResult]:
        """Wait for pending upserts and return their results."""
        pending, self.pending = self.pending, []
        done, not_done = wait(pending, timeout=timeout)
        if not_done:
            logger.warning(f"{len(not_done)} summary upserts still running")
        return [f.result() for f in pending if f in done]
