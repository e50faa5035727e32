"""Sync weekly summaries to the remote summary table."""

from typing import List, Optional

import click

from labor_cost.aggregators.weekly_cost_aggregator import GroupBy
from labor_cost.cli.context import build_summary_table, load_settings, open_repository
from labor_cost.cli.error_handlers import (
    APIError,
    DataValidationError,
    with_error_handling,
)
from labor_cost.cli.utils.formatters import (
    format_heading,
    format_info,
    format_success,
    format_table,
)
from labor_cost.exporters.formatting import (
    format_currency,
    format_hours,
    format_week_range,
)
from labor_cost.sync.publisher import RepositoryPublisher
from labor_cost.sync.synchronizer import (
    SummarySynchronizer,
    SyncResult,
    summary_row_from_aggregate,
)
from labor_cost.sync.view import SummaryView


def _print_results(results: List[SyncResult], names: dict) -> None:
    rows = [
        [
            names.get(r.employee_id, r.employee_id),
            r.week_start.isoformat(),
            click.style("ok", fg="green") if r.success else click.style("failed", fg="red"),
            r.row.id if r.row else (r.error or ""),
        ]
        for r in sorted(results, key=lambda r: (r.employee_id, r.week_start))
    ]
    click.echo(format_table(["Employee", "Week", "Status", "Row / Error"], rows, max_width=50))


def _print_view(view: SummaryView, symbol: str) -> None:
    pending = set(view.pending_weeks)
    rows = [
        [
            format_week_range(row.week_start, row.week_end),
            format_hours(row.total_hours),
            format_currency(row.total_cost, symbol),
            row.entries,
            "local" if row.week_start in pending else "remote",
        ]
        for row in view.rows()
    ]
    click.echo(
        format_table(
            ["Week", "Hours", "Cost", "Entries", "Source"],
            rows,
            max_width=60,
            align_right=[1, 2, 3],
        )
    )


@click.command(name="sync-summaries")
@click.argument("employee_id", required=False)
@click.option("--all", "all_employees", is_flag=True, help="Sync every employee")
@click.option(
    "--dry-run",
    is_flag=True,
    help="Publish to an in-memory table instead of the remote sheet",
)
@click.option("--timeout", type=float, default=60.0, show_default=True, help="Seconds to wait")
def sync_summaries(
    employee_id: Optional[str], all_employees: bool, dry_run: bool, timeout: float
):
    """Publish weekly summaries and show the remote table's rows.

    Example:
        labor-cost sync-summaries 1
        labor-cost sync-summaries --all --dry-run
    """
    with with_error_handling():
        if bool(employee_id) == all_employees:
            raise DataValidationError(
                "Give either EMPLOYEE_ID or --all",
                "Run 'labor-cost employees list' to see employee ids",
            )

        config = load_settings()
        repository = open_repository(config)
        if employee_id is not None:
            repository.get_employee(employee_id)
        names = {e.id: e.name for e in repository.employees}

        table = build_summary_table(config, dry_run=dry_run)
        if dry_run:
            click.echo(format_info("Dry run: publishing to an in-memory table"))

        with SummarySynchronizer(table, max_workers=config.sync_max_workers) as synchronizer:
            publisher = RepositoryPublisher(repository, synchronizer)
            view = None
            if employee_id is not None:
                view = SummaryView(employee_id)
                synchronizer.watch(employee_id, view)
                aggregates = repository.aggregator().aggregate(
                    repository.time_entries, GroupBy.employee(employee_id)
                )
                view.show_local(summary_row_from_aggregate(a) for a in aggregates)
                publisher.publish_employee(employee_id)
            else:
                publisher.publish_all()

            results = publisher.wait(timeout=timeout)

            if not results:
                click.echo(format_info("Nothing to sync; no time has been logged."))
                return

            _print_results(results, names)
            if view is not None:
                if view.pending_weeks and not dry_run:
                    # polling may not have seen the writes yet
                    view.load(table.select(employee_id))
                click.echo()
                click.echo(format_heading(f"Weekly summaries of {names[employee_id]}"))
                _print_view(view, config.currency_symbol)

        failed = [r for r in results if not r.success]
        if failed:
            raise APIError(
                f"{len(failed)} of {len(results)} weekly summaries failed to sync",
                "Check the errors above and run the command again",
            )
        click.echo(format_success(f"Synced {len(results)} weekly summaries"))
