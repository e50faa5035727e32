"""Timesheet and payslip export commands."""

from pathlib import Path
from typing import Optional

import click

from labor_cost.cli.context import (
    branding_from,
    load_settings,
    open_repository,
    select_timesheet,
)
from labor_cost.cli.error_handlers import with_error_handling
from labor_cost.cli.utils.formatters import format_info, format_success
from labor_cost.exporters.formatting import format_week_range
from labor_cost.exporters.pdf_exporter import export_payslip_pdf, export_timesheet_pdf
from labor_cost.exporters.spreadsheet_exporter import export_timesheet_xlsx

WEEK_HELP = "Any date in the week (YYYY-MM-DD, default: most recent week with entries)"
OUTPUT_HELP = "Directory for the file (default: EXPORT_DIR)"


@click.command(name="export-timesheet")
@click.argument("employee_id")
@click.option("--week", default=None, help=WEEK_HELP)
@click.option(
    "--format",
    "formats",
    type=click.Choice(["xlsx", "pdf"]),
    multiple=True,
    default=("xlsx", "pdf"),
    show_default=True,
)
@click.option("--output-dir", type=click.Path(file_okay=False, path_type=Path), default=None, help=OUTPUT_HELP)
def export_timesheet(
    employee_id: str, week: Optional[str], formats: tuple, output_dir: Optional[Path]
):
    """Export an employee's weekly timesheet as Excel and/or PDF.

    Example:
        labor-cost export-timesheet 1 --week 2025-10-28 --format xlsx
    """
    with with_error_handling():
        config = load_settings()
        repository = open_repository(config)
        employee = repository.get_employee(employee_id)
        timesheet = select_timesheet(repository, employee_id, week)
        target = output_dir or config.export_dir
        branding = branding_from(config)

        click.echo(
            format_info(
                f"Exporting {employee.name}, "
                f"{format_week_range(timesheet.week_start, timesheet.week_end)}"
            )
        )
        if "xlsx" in formats:
            path = export_timesheet_xlsx(employee, timesheet, target, branding)
            click.echo(format_success(f"Wrote {path}"))
        if "pdf" in formats:
            path = export_timesheet_pdf(employee, timesheet, target, branding)
            click.echo(format_success(f"Wrote {path}"))


@click.command(name="payslip")
@click.argument("employee_id")
@click.option("--week", default=None, help=WEEK_HELP)
@click.option("--output-dir", type=click.Path(file_okay=False, path_type=Path), default=None, help=OUTPUT_HELP)
def payslip(employee_id: str, week: Optional[str], output_dir: Optional[Path]):
    """Generate an employee's weekly payslip PDF.

    Example:
        labor-cost payslip 1 --week 2025-10-28
    """
    with with_error_handling():
        config = load_settings()
        repository = open_repository(config)
        employee = repository.get_employee(employee_id)
        timesheet = select_timesheet(repository, employee_id, week)

        path = export_payslip_pdf(
            employee, timesheet, output_dir or config.export_dir, branding_from(config)
        )
        click.echo(format_success(f"Wrote {path}"))
