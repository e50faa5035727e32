"""Building blocks shared by CLI commands."""

import datetime as dt
import logging
from contextlib import contextmanager
from typing import List, Optional

import click
from pydantic import ValidationError

from labor_cost.aggregators.weekly_cost_aggregator import (
    GroupBy,
    MissingReferencePolicy,
    WeeklyTimesheet,
)
from labor_cost.calculators.weeks import week_start
from labor_cost.cli.error_handlers import ConfigurationError, DataValidationError
from labor_cost.config.settings import LaborCostConfig, get_config
from labor_cost.exporters.formatting import Branding
from labor_cost.services.google_sheets_service import GoogleSheetsService
from labor_cost.services.retry_handler import RetryHandler
from labor_cost.storage.kv_store import FileKeyValueStore
from labor_cost.storage.record_store import RecordStore
from labor_cost.storage.repository import LaborCostRepository
from labor_cost.sync.publisher import RepositoryPublisher
from labor_cost.sync.summary_table import (
    InMemorySummaryTable,
    SheetsSummaryTable,
    SummaryTable,
)
from labor_cost.sync.synchronizer import SummarySynchronizer

logger = logging.getLogger(__name__)

POLICY_CHOICES = {
    "include": MissingReferencePolicy.INCLUDE_AT_ZERO_COST,
    "exclude": MissingReferencePolicy.EXCLUDE,
}


def load_settings() -> LaborCostConfig:
    """Global configuration, with validation errors reported as CLI errors."""
    try:
        return get_config()
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'settings'}: {err['msg']}"
            for err in e.errors()
        )
        raise ConfigurationError(problems, "Check your environment and .env file")


def open_repository(config: Optional[LaborCostConfig] = None) -> LaborCostRepository:
    """Repository over the JSON files in the configured data directory."""
    config = config or load_settings()
    store = RecordStore(FileKeyValueStore(config.data_dir))
    repository = LaborCostRepository(store)

    report = store.last_load_report
    if report is not None and report.skipped_records:
        click.echo(
            click.style(
                f"⚠ Skipped {report.skipped_records} invalid stored record(s)",
                fg="yellow",
            ),
            err=True,
        )
    return repository


def build_summary_table(
    config: LaborCostConfig, dry_run: bool = False
) -> SummaryTable:
    """The remote summary table, or an in-memory one for dry runs.

    Raises:
        ConfigurationError: If remote sync is disabled and this is no dry run
    """
    if dry_run:
        return InMemorySummaryTable()

    if not config.remote_sync_enabled:
        raise ConfigurationError(
            "Remote sync is disabled",
            "Set REMOTE_SYNC_ENABLED=true and SUMMARY_SPREADSHEET_ID, "
            "or pass --dry-run",
        )

    sheets = GoogleSheetsService(
        credentials=config.get_google_service_account_info(),
        retry_handler=RetryHandler(
            max_retries=config.max_retries, base_delay=config.retry_delay
        ),
    )
    return SheetsSummaryTable(
        sheets,
        config.summary_spreadsheet_id,
        sheet_name=config.summary_sheet_name,
        poll_interval=config.sync_poll_interval,
    )


def branding_from(config: LaborCostConfig) -> Branding:
    return Branding.from_config(config)


def parse_date(value: Optional[str], default: Optional[dt.date] = None) -> dt.date:
    """Parse a YYYY-MM-DD date option.

    Raises:
        DataValidationError: If the value is not a valid date
    """
    if value is None:
        if default is None:
            raise DataValidationError("A date is required")
        return default
    try:
        return dt.datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        raise DataValidationError(
            f"Invalid date: {value}", "Use the YYYY-MM-DD format"
        )


def select_timesheet(
    repository: LaborCostRepository, employee_id: str, week: Optional[str]
) -> WeeklyTimesheet:
    """The employee's timesheet for the week containing ``week``.

    Without a week, the most recent week with entries is used.

    Raises:
        DataValidationError: If there is no timesheet for that week
    """
    timesheets: List[WeeklyTimesheet] = repository.aggregator().build_weekly_timesheets(
        repository.time_entries, GroupBy.employee(employee_id)
    )
    if not timesheets:
        raise DataValidationError(
            f"No time entries for employee {employee_id}",
            "Log time with 'labor-cost log-time' first",
        )
    if week is None:
        return timesheets[0]

    start = week_start(parse_date(week))
    for timesheet in timesheets:
        if timesheet.week_start == start:
            return timesheet
    raise DataValidationError(
        f"No time entries for employee {employee_id} in the week of {start}",
        "Run 'labor-cost weekly-summary' to see weeks with entries",
    )


def _warn_not_mirrored(detail: str) -> None:
    click.echo(
        click.style(
            f"⚠ {detail}; run 'labor-cost sync-summaries' later",
            fg="yellow",
        ),
        err=True,
    )


@contextmanager
def mirror_changes(repository: LaborCostRepository, config: LaborCostConfig):
    """Republish weekly summaries for changes made inside the block.

    Does nothing while remote sync is disabled. A remote table that cannot
    be set up and failed upserts are reported as warnings; the local change
    stands either way.
    """
    if not config.remote_sync_enabled:
        yield None
        return

    try:
        synchronizer = SummarySynchronizer(
            build_summary_table(config), max_workers=config.sync_max_workers
        )
    except Exception as e:
        logger.warning(f"Remote summary table unavailable: {type(e).__name__}: {e}")
        yield None
        _warn_not_mirrored("Weekly summaries were not mirrored")
        return

    publisher = RepositoryPublisher(repository, synchronizer).attach()
    try:
        yield publisher
        results = publisher.wait()
    finally:
        publisher.detach()
        synchronizer.close()

    failed = [r for r in results if not r.success]
    if failed:
        _warn_not_mirrored(
            f"{len(failed)} of {len(results)} weekly summaries were not mirrored"
        )
    elif results:
        logger.info(f"Mirrored {len(results)} weekly summaries")
