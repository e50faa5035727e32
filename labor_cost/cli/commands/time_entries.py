"""Log time command."""

import datetime as dt
from typing import Optional, Tuple

import click

from labor_cost.cli.context import load_settings, mirror_changes, open_repository, parse_date
from labor_cost.cli.error_handlers import DataValidationError, with_error_handling
from labor_cost.cli.utils.formatters import format_success, format_table, format_warning
from labor_cost.cli.utils.params import ASSIGNMENT
from labor_cost.exporters.formatting import format_hours, format_long_date


@click.command(name="log-time")
@click.option("--project", "project_id", required=True, help="Project ID")
@click.option(
    "--date",
    "date_str",
    default=None,
    help="Date worked (YYYY-MM-DD, default: today)",
)
@click.option(
    "--assign",
    "-a",
    "assignments",
    type=ASSIGNMENT,
    multiple=True,
    required=True,
    help="EMPLOYEE_ID=HOURS; repeat for several employees",
)
def log_time(project_id: str, date_str: Optional[str], assignments: Tuple):
    """Log hours for one or more employees on a project.

    Assignments with zero hours are ignored.

    Example:
        labor-cost log-time --project 1 --date 2025-10-28 -a 1=8 -a 2=6
    """
    with with_error_handling():
        date = parse_date(date_str, default=dt.date.today())
        config = load_settings()
        repository = open_repository(config)

        with mirror_changes(repository, config):
            entries = repository.log_time(project_id, date, assignments)

        if not entries:
            click.echo(format_warning("No hours to log; all assignments were empty"))
            raise DataValidationError("Nothing logged", "Give hours greater than zero")

        project = repository.get_project(project_id)
        rows = []
        for entry in entries:
            rows.append(
                [repository.get_employee(entry.employee_id).name, format_hours(entry.hours)]
            )
        click.echo(format_table(["Employee", "Hours"], rows, align_right=[1]))
        click.echo(
            format_success(
                f"Logged {len(entries)} entries on {project.name} "
                f"for {format_long_date(date)}"
            )
        )
