"""Weekly summary row as mirrored in the remote summary table."""

import datetime as dt
from decimal import Decimal
from typing import Any, Optional, Union

from pydantic import Field, field_validator, model_validator

from labor_cost.models.base import BaseDataModel

SUMMARY_COLUMNS = [
    "id",
    "employee_id",
    "week_start",
    "week_end",
    "total_hours",
    "total_cost",
    "entries",
]


class SummaryRow(BaseDataModel):
    """One (employee, week) row of the remote ``weekly_summaries`` table.

    The row is keyed by ``(employee_id, week_start)`` for upserts; ``id`` is
    the identifier assigned by the remote table and is the merge key for
    change notifications. ``total_cost`` is never null: a missing cost is
    stored as zero.

    Example:
        >>> row = SummaryRow(
        ...     employee_id="1",
        ...     week_start="2025-10-26",
        ...     week_end="2025-11-01",
        ...     total_hours=12,
        ...     total_cost=None,
        ...     entries=2,
        ... )
        >>> row.total_cost
        Decimal('0')
    """

    id: Optional[str] = Field(None, description="Remote row identifier")
    employee_id: str = Field(..., min_length=1)
    week_start: dt.date
    week_end: dt.date
    total_hours: Decimal = Field(default=Decimal("0"))
    total_cost: Decimal = Field(default=Decimal("0"))
    entries: int = Field(default=0, ge=0)

    @field_validator("id", mode="before")
    @classmethod
    def blank_id_to_none(cls, v: Any) -> Optional[str]:
        """Treat blank identifiers (e.g. empty sheet cells) as unassigned."""
        if v is None:
            return None
        v = str(v).strip()
        return v or None

    @field_validator("employee_id", mode="before")
    @classmethod
    def stringify_employee_id(cls, v: Any) -> str:
        """Sheets may hand back numeric ids as numbers."""
        if isinstance(v, float) and v.is_integer():
            v = int(v)
        return str(v) if v is not None else v

    @field_validator("week_start", "week_end", mode="before")
    @classmethod
    def parse_date(cls, v: Union[str, dt.date, dt.datetime]) -> dt.date:
        """Accept ISO date strings and datetimes."""
        if isinstance(v, dt.datetime):
            return v.date()
        if isinstance(v, str):
            return dt.date.fromisoformat(v.strip()[:10])
        return v

    @field_validator("total_hours", "total_cost", mode="before")
    @classmethod
    def null_to_zero(cls, v: Any) -> Decimal:
        """Coerce null or blank amounts to zero and numbers to Decimal."""
        if v is None or (isinstance(v, str) and not v.strip()):
            return Decimal("0")
        if isinstance(v, Decimal):
            return v
        try:
            return Decimal(str(v))
        except ArithmeticError as e:
            raise ValueError(f"Cannot convert {v} to Decimal: {e}")

    @field_validator("entries", mode="before")
    @classmethod
    def parse_entries(cls, v: Any) -> int:
        """Accept counts delivered as strings or floats."""
        if v is None or (isinstance(v, str) and not v.strip()):
            return 0
        return int(float(v))

    @model_validator(mode="after")
    def validate_week_span(self) -> "SummaryRow":
        """Week end must be exactly six days after week start.

        Raises:
            ValueError: If the span is not a Sunday to Saturday week
        """
        if self.week_end - self.week_start != dt.timedelta(days=6):
            raise ValueError(
                f"week_end ({self.week_end}) must be 6 days after "
                f"week_start ({self.week_start})"
            )
        return self

    @property
    def key(self) -> tuple:
        """Upsert key of the row."""
        return (self.employee_id, self.week_start)

    def to_sheet_values(self) -> list:
        """Row values in ``SUMMARY_COLUMNS`` order, as text for the sheet."""
        return [
            self.id or "",
            self.employee_id,
            self.week_start.isoformat(),
            self.week_end.isoformat(),
            str(self.total_hours),
            str(self.total_cost),
            str(self.entries),
        ]
