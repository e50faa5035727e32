"""Custom click parameter types."""

from decimal import Decimal, InvalidOperation

import click


class DecimalParamType(click.ParamType):
    """Non-negative decimal amount, such as an hourly rate or hours."""

    name = "decimal"

    def convert(self, value, param, ctx):
        if isinstance(value, Decimal):
            return value
        try:
            result = Decimal(str(value).strip())
        except InvalidOperation:
            self.fail(f"{value!r} is not a valid number", param, ctx)
        if not result.is_finite() or result < 0:
            self.fail(f"{value!r} must be a non-negative number", param, ctx)
        return result


class AssignmentParamType(click.ParamType):
    """``EMPLOYEE_ID=HOURS`` pair for logging time."""

    name = "employee=hours"

    def convert(self, value, param, ctx):
        if isinstance(value, tuple):
            return value
        employee_id, sep, hours = str(value).partition("=")
        if not sep or not employee_id.strip():
            self.fail(f"{value!r} is not in EMPLOYEE_ID=HOURS form", param, ctx)
        try:
            amount = Decimal(hours.strip())
        except InvalidOperation:
            self.fail(f"{hours!r} is not a valid number of hours", param, ctx)
        if not amount.is_finite() or amount < 0:
            self.fail(f"{hours!r} must be a non-negative number of hours", param, ctx)
        return employee_id.strip(), amount


DECIMAL = DecimalParamType()
ASSIGNMENT = AssignmentParamType()
