"""Employee data model.

An employee carries two fixed hourly rates. Which one applies to a time
entry is decided by the project the entry is logged against.
"""

from decimal import Decimal
from typing import Union

from pydantic import Field, field_validator

from labor_cost.models.base import BaseDataModel


class Employee(BaseDataModel):
    """Represents an employee and their pay rates.

    Attributes:
        id: Unique employee identifier
        name: Employee name
        role: Job role (e.g. "Carpenter")
        local_rate: Hourly rate for local projects (stored as ``hourlyRate``)
        dublin_rate: Hourly rate for Dublin projects (stored as ``dublinRate``)

    Example:
        >>> employee = Employee(
        ...     id="1",
        ...     name="John Smith",
        ...     role="Carpenter",
        ...     hourlyRate=45,
        ...     dublinRate=55,
        ... )
        >>> employee.dublin_rate
        Decimal('55')
    """

    id: str = Field(..., min_length=1, description="Unique employee identifier")
    name: str = Field(..., min_length=1, description="Employee name")
    role: str = Field(default="", description="Job role")
    local_rate: Decimal = Field(
        ..., ge=0, alias="hourlyRate", description="Local hourly rate"
    )
    dublin_rate: Decimal = Field(
        ..., ge=0, alias="dublinRate", description="Dublin hourly rate"
    )

    @field_validator("id", "name")
    @classmethod
    def validate_not_empty(cls, v: str, info) -> str:
        """Validate that string fields are not empty or whitespace only.

        Raises:
            ValueError: If the value is empty or whitespace only
        """
        if not v or not v.strip():
            raise ValueError(f"{info.field_name} cannot be empty or whitespace")
        return v.strip()

    @field_validator("local_rate", "dublin_rate", mode="before")
    @classmethod
    def convert_to_decimal(cls, v: Union[str, int, float, Decimal]) -> Decimal:
        """Convert numeric values to Decimal for precision.

        Floats go through ``str`` so that 45.5 stays 45.5 rather than its
        binary expansion.

        Raises:
            ValueError: If the value cannot be converted to Decimal
        """
        if isinstance(v, Decimal):
            return v
        if v is None or isinstance(v, bool):
            raise ValueError(f"Cannot convert {v!r} to Decimal")
        try:
            return Decimal(str(v))
        except (ValueError, TypeError, ArithmeticError) as e:
            raise ValueError(f"Cannot convert {v} to Decimal: {e}")
