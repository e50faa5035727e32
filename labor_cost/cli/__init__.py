"""Labor Cost Tracker CLI.

Commands for managing employees and projects, logging time, reviewing
weekly costs, exporting timesheets and payslips, and mirroring weekly
summaries to the remote summary table.
"""

import click

from labor_cost import __version__
from labor_cost.cli.commands.employees import employees
from labor_cost.cli.commands.export import export_timesheet, payslip
from labor_cost.cli.commands.projects import projects
from labor_cost.cli.commands.summary import weekly_summary
from labor_cost.cli.commands.sync import sync_summaries
from labor_cost.cli.commands.time_entries import log_time
from labor_cost.config.logging_config import LoggingConfig, configure_logging


@click.group(
    help="Labor Cost Tracker CLI - Log employee hours and track weekly labor costs"
)
@click.option("--debug", is_flag=True, help="Show full stack traces on errors")
@click.version_option(version=__version__)
def cli(debug: bool):
    """Labor Cost Tracker CLI main entry point."""


# Register commands
cli.add_command(employees)
cli.add_command(projects)
cli.add_command(log_time)
cli.add_command(weekly_summary)
cli.add_command(export_timesheet)
cli.add_command(payslip)
cli.add_command(sync_summaries)


def main():
    """Main entry point for the CLI."""
    configure_logging(LoggingConfig.from_env(default_level="WARNING"))
    cli()


if __name__ == "__main__":
    main()
