"""Project management commands."""

from typing import Optional

import click

from labor_cost.aggregators.weekly_cost_aggregator import UNKNOWN_EMPLOYEE, GroupBy
from labor_cost.cli.context import (
    POLICY_CHOICES,
    load_settings,
    mirror_changes,
    open_repository,
)
from labor_cost.cli.error_handlers import with_error_handling
from labor_cost.cli.utils.formatters import (
    format_heading,
    format_info,
    format_success,
    format_table,
)
from labor_cost.exporters.formatting import (
    format_currency,
    format_hours,
    format_long_date,
    format_week_range,
)

STATUS_CHOICES = click.Choice(["active", "completed", "pending"])
RATE_TYPE_CHOICES = click.Choice(["local", "dublin"])


@click.group(name="projects")
def projects():
    """List and manage projects."""


@projects.command(name="list")
def list_projects():
    """List all projects with their total cost."""
    with with_error_handling():
        config = load_settings()
        repository = open_repository(config)
        costs = repository.aggregator().calculate_project_costs(repository.time_entries)
        rows = [
            [
                p.id,
                p.name,
                p.client,
                p.status,
                p.rate_label,
                format_hours(costs[p.id].total_hours),
                format_currency(costs[p.id].total_cost, config.currency_symbol),
            ]
            for p in repository.projects
        ]
        if not rows:
            click.echo(format_info("No projects yet."))
            return
        click.echo(
            format_table(
                ["ID", "Name", "Client", "Status", "Rate", "Hours", "Cost"],
                rows,
                align_right=[5, 6],
            )
        )


@projects.command(name="add")
@click.option("--name", required=True)
@click.option("--client", required=True)
@click.option("--status", type=STATUS_CHOICES, default="active", show_default=True)
@click.option("--rate-type", type=RATE_TYPE_CHOICES, default="local", show_default=True)
def add_project(name: str, client: str, status: str, rate_type: str):
    """Add a project.

    Example:
        labor-cost projects add --name "Loft Conversion" --client "Lee Home" --rate-type dublin
    """
    with with_error_handling():
        repository = open_repository()
        project = repository.add_project(name, client, status, rate_type)
        click.echo(
            format_success(
                f"Added project {project.name} ({project.id}), {project.rate_label}"
            )
        )


@projects.command(name="update")
@click.argument("project_id")
@click.option("--name", default=None)
@click.option("--client", default=None)
@click.option("--status", type=STATUS_CHOICES, default=None)
@click.option("--rate-type", type=RATE_TYPE_CHOICES, default=None)
def update_project(
    project_id: str,
    name: Optional[str],
    client: Optional[str],
    status: Optional[str],
    rate_type: Optional[str],
):
    """Update a project.

    Changing the rate type re-costs every entry logged on the project.
    """
    with with_error_handling():
        config = load_settings()
        repository = open_repository(config)
        with mirror_changes(repository, config):
            project = repository.update_project(
                project_id, name=name, client=client, status=status, rate_type=rate_type
            )
        click.echo(format_success(f"Updated project {project.name} ({project.id})"))


@projects.command(name="show")
@click.argument("project_id")
@click.option(
    "--missing",
    type=click.Choice(sorted(POLICY_CHOICES)),
    default="exclude",
    show_default=True,
    help="How to count entries of deleted employees",
)
def show_project(project_id: str, missing: str):
    """Show a project's totals, weekly costs and entries by date."""
    with with_error_handling():
        config = load_settings()
        symbol = config.currency_symbol
        repository = open_repository(config)
        project = repository.get_project(project_id)
        aggregator = repository.aggregator()
        entries = repository.time_entries
        group_by = GroupBy.project(project_id)
        policy = POLICY_CHOICES[missing]

        totals = aggregator.calculate_totals(entries, group_by, policy)
        click.echo(format_heading(f"{project.name} - {project.client}"))
        click.echo(f"Status: {project.status}   Rate: {project.rate_label}")
        click.echo(
            f"Total: {format_hours(totals.total_hours)} h, "
            f"{format_currency(totals.total_cost, symbol)} "
            f"({totals.entry_count} entries)"
        )
        if totals.skipped_entries:
            click.echo(
                format_info(
                    f"{totals.skipped_entries} entries without a known employee "
                    f"are not counted"
                )
            )

        weeks = aggregator.aggregate(entries, group_by, policy)
        if not weeks:
            click.echo(format_info("No time logged on this project."))
            return

        click.echo()
        click.echo(
            format_table(
                ["Week", "Hours", "Cost", "Entries"],
                [
                    [
                        format_week_range(w.week_start, w.week_end),
                        format_hours(w.total_hours),
                        format_currency(w.total_cost, symbol),
                        w.entry_count,
                    ]
                    for w in weeks
                ],
                max_width=60,
                align_right=[1, 2, 3],
            )
        )

        click.echo()
        for group in aggregator.group_entries_by_date(entries, group_by, policy):
            click.echo(
                f"{format_long_date(group.date)}: {format_hours(group.total_hours)} h, "
                f"{format_currency(group.total_cost, symbol)}"
            )
            for entry in group.entries:
                employee = repository.find_employee(entry.employee_id)
                name = employee.name if employee else UNKNOWN_EMPLOYEE
                click.echo(f"    {name}: {format_hours(entry.hours)} h")
