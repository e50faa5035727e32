"""Time entry data model."""

import datetime as dt
from decimal import Decimal
from typing import Union

from pydantic import Field, field_validator

from labor_cost.models.base import BaseDataModel


class TimeEntry(BaseDataModel):
    """Hours one employee worked on one project on one calendar date.

    Entries are only ever created. The rate is not stored on the entry; it is
    resolved from the employee and project whenever costs are computed.

    Attributes:
        id: Unique entry identifier
        employee_id: Referenced employee (stored as ``employeeId``)
        project_id: Referenced project (stored as ``projectId``)
        date: Calendar date of the work
        hours: Hours worked, strictly positive

    Example:
        >>> entry = TimeEntry(
        ...     id="1", employeeId="1", projectId="2", date="2025-10-28", hours=8
        ... )
        >>> entry.date
        datetime.date(2025, 10, 28)
    """

    id: str = Field(..., min_length=1, description="Unique entry identifier")
    employee_id: str = Field(..., min_length=1, alias="employeeId")
    project_id: str = Field(..., min_length=1, alias="projectId")
    date: dt.date = Field(..., description="Date of work")
    hours: Decimal = Field(..., gt=0, description="Hours worked")

    @field_validator("date", mode="before")
    @classmethod
    def parse_date(cls, v: Union[str, dt.date, dt.datetime]) -> dt.date:
        """Accept ISO date strings, dropping any time-of-day part.

        Raises:
            ValueError: If the value is not a recognisable date
        """
        if isinstance(v, dt.datetime):
            return v.date()
        if isinstance(v, str):
            try:
                return dt.date.fromisoformat(v[:10])
            except ValueError:
                raise ValueError(f"Invalid date: {v!r}. Expected YYYY-MM-DD")
        return v

    @field_validator("hours", mode="before")
    @classmethod
    def convert_to_decimal(cls, v: Union[str, int, float, Decimal]) -> Decimal:
        """Convert hours to Decimal for exact cost arithmetic."""
        if isinstance(v, Decimal):
            return v
        if v is None or isinstance(v, bool):
            raise ValueError(f"Cannot convert {v!r} to Decimal")
        try:
            return Decimal(str(v))
        except (ValueError, TypeError, ArithmeticError) as e:
            raise ValueError(f"Cannot convert {v} to Decimal: {e}")
