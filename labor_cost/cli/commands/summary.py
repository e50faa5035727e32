"""Weekly summary command."""

from typing import Optional

import click

from labor_cost.aggregators.weekly_cost_aggregator import GroupBy, weekly_cost_matrix
from labor_cost.cli.context import POLICY_CHOICES, load_settings, open_repository
from labor_cost.cli.error_handlers import DataValidationError, with_error_handling
from labor_cost.cli.utils.formatters import (
    format_heading,
    format_info,
    format_table,
)
from labor_cost.exporters.formatting import (
    format_currency,
    format_hours,
    format_long_date,
    format_rate,
    format_week_range,
)


@click.command(name="weekly-summary")
@click.argument("employee_id", required=False)
@click.option("--details", is_flag=True, help="Show each entry of every week")
@click.option(
    "--missing",
    type=click.Choice(sorted(POLICY_CHOICES)),
    default="include",
    show_default=True,
    help="How to count entries on deleted projects",
)
@click.option(
    "--all",
    "all_employees",
    is_flag=True,
    help="Show a cost matrix of every employee by week instead",
)
@click.option(
    "--value",
    type=click.Choice(["total_cost", "total_hours"]),
    default="total_cost",
    show_default=True,
    help="Matrix cell value, with --all",
)
def weekly_summary(
    employee_id: Optional[str],
    details: bool,
    missing: str,
    all_employees: bool,
    value: str,
):
    """Show an employee's hours and cost per Sunday-Saturday week.

    Example:
        labor-cost weekly-summary 1 --details
        labor-cost weekly-summary --all
    """
    with with_error_handling():
        config = load_settings()
        symbol = config.currency_symbol
        repository = open_repository(config)
        aggregator = repository.aggregator()
        entries = repository.time_entries
        policy = POLICY_CHOICES[missing]

        if all_employees:
            aggregates = []
            for employee in repository.employees:
                aggregates.extend(
                    aggregator.aggregate(entries, GroupBy.employee(employee.id), policy)
                )
            matrix = weekly_cost_matrix(aggregates, value=value)
            if matrix.empty:
                click.echo(format_info("No time logged yet."))
                return
            names = {e.id: e.name for e in repository.employees}
            matrix.index = [names.get(i, i) for i in matrix.index]
            click.echo(matrix.fillna(0).to_string())
            return

        if employee_id is None:
            raise DataValidationError(
                "EMPLOYEE_ID is required unless --all is given",
                "Run 'labor-cost employees list' to see employee ids",
            )

        employee = repository.get_employee(employee_id)
        group_by = GroupBy.employee(employee_id)
        click.echo(format_heading(f"{employee.name} ({employee.role})"))
        click.echo(
            f"Local Rate: {format_rate(employee.local_rate, symbol)} | "
            f"Dublin Rate: {format_rate(employee.dublin_rate, symbol)}"
        )

        weeks = aggregator.aggregate(entries, group_by, policy)
        if not weeks:
            click.echo(format_info("No time logged for this employee."))
            return

        totals = aggregator.calculate_totals(entries, group_by, policy)
        click.echo(
            f"Total: {format_hours(totals.total_hours)} h, "
            f"{format_currency(totals.total_cost, symbol)}"
        )
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

        project_costs = aggregator.calculate_employee_project_costs(
            entries, employee_id, policy
        )
        click.echo()
        click.echo(format_heading(f"Projects ({len(project_costs)})"))
        click.echo(
            format_table(
                ["Project", "Client", "Hours", "Cost"],
                [
                    [
                        p.project_name,
                        p.client,
                        format_hours(p.total_hours),
                        format_currency(p.total_cost, symbol),
                    ]
                    for p in project_costs
                ],
                align_right=[2, 3],
            )
        )

        if not details:
            return

        for timesheet in aggregator.build_weekly_timesheets(entries, group_by, policy):
            click.echo()
            click.echo(format_heading(format_week_range(timesheet.week_start, timesheet.week_end)))
            click.echo(
                format_table(
                    ["Date", "Project", "Rate", "Hours", "Cost"],
                    [
                        [
                            format_long_date(line.date),
                            line.project_name,
                            format_rate(line.rate, symbol),
                            format_hours(line.hours),
                            format_currency(line.cost, symbol),
                        ]
                        for line in timesheet.daily_entries
                    ],
                    align_right=[2, 3, 4],
                )
            )
