"""Employee management commands."""

from decimal import Decimal
from typing import Optional

import click

from labor_cost.cli.context import load_settings, mirror_changes, open_repository
from labor_cost.cli.error_handlers import with_error_handling
from labor_cost.cli.utils.formatters import format_info, format_success, format_table
from labor_cost.cli.utils.params import DECIMAL
from labor_cost.exporters.formatting import format_rate


@click.group(name="employees")
def employees():
    """List and manage employees."""


@employees.command(name="list")
def list_employees():
    """List all employees with their rates.

    Example:
        labor-cost employees list
    """
    with with_error_handling():
        config = load_settings()
        symbol = config.currency_symbol
        repository = open_repository(config)
        rows = [
            [
                e.id,
                e.name,
                e.role,
                format_rate(e.local_rate, symbol),
                format_rate(e.dublin_rate, symbol),
            ]
            for e in repository.employees
        ]
        if not rows:
            click.echo(format_info("No employees yet."))
            return
        click.echo(
            format_table(
                ["ID", "Name", "Role", "Local Rate", "Dublin Rate"],
                rows,
                align_right=[3, 4],
            )
        )


@employees.command(name="add")
@click.option("--name", required=True, help="Full name")
@click.option("--role", default="", help="Job role, e.g. Carpenter")
@click.option("--local-rate", required=True, type=DECIMAL, help="Hourly local rate")
@click.option(
    "--dublin-rate",
    type=DECIMAL,
    default=None,
    help="Hourly Dublin rate (default: 1.2x the local rate)",
)
def add_employee(name: str, role: str, local_rate: Decimal, dublin_rate: Optional[Decimal]):
    """Add an employee.

    Example:
        labor-cost employees add --name "Ann Lee" --role Plumber --local-rate 50
    """
    with with_error_handling():
        config = load_settings()
        repository = open_repository(config)
        employee = repository.add_employee(name, role, local_rate, dublin_rate)
        click.echo(
            format_success(
                f"Added {employee.name} ({employee.id}) at "
                f"{format_rate(employee.local_rate, config.currency_symbol)} local / "
                f"{format_rate(employee.dublin_rate, config.currency_symbol)} Dublin"
            )
        )


@employees.command(name="update")
@click.argument("employee_id")
@click.option("--name", default=None)
@click.option("--role", default=None)
@click.option("--local-rate", type=DECIMAL, default=None)
@click.option("--dublin-rate", type=DECIMAL, default=None)
def update_employee(
    employee_id: str,
    name: Optional[str],
    role: Optional[str],
    local_rate: Optional[Decimal],
    dublin_rate: Optional[Decimal],
):
    """Update an employee's details or rates.

    Existing time entries are re-costed with the new rates.
    """
    with with_error_handling():
        config = load_settings()
        repository = open_repository(config)
        with mirror_changes(repository, config):
            employee = repository.update_employee(
                employee_id,
                name=name,
                role=role,
                local_rate=local_rate,
                dublin_rate=dublin_rate,
            )
        click.echo(format_success(f"Updated {employee.name} ({employee.id})"))


@employees.command(name="delete")
@click.argument("employee_id")
@click.confirmation_option(prompt="Delete this employee? Their time entries are kept.")
def delete_employee(employee_id: str):
    """Delete an employee."""
    with with_error_handling():
        repository = open_repository()
        name = repository.get_employee(employee_id).name
        repository.delete_employee(employee_id)
        click.echo(format_success(f"Deleted {name} ({employee_id})"))
