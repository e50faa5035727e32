"""Project data model.

A project selects which employee rate applies to every time entry logged
against it.
"""

from typing import Literal

from pydantic import Field, field_validator

from labor_cost.models.base import BaseDataModel

ProjectStatus = Literal["active", "completed", "pending"]
RateType = Literal["local", "dublin"]


class Project(BaseDataModel):
    """Represents a project.

    Attributes:
        id: Unique project identifier
        name: Project name
        client: Client name
        status: One of "active", "completed", "pending"
        rate_type: Rate selector, "local" or "dublin" (stored as ``rateType``)

    Example:
        >>> project = Project(
        ...     id="2",
        ...     name="Bathroom Remodel",
        ...     client="Johnson Home",
        ...     status="active",
        ...     rateType="dublin",
        ... )
        >>> project.rate_type
        'dublin'
    """

    id: str = Field(..., min_length=1, description="Unique project identifier")
    name: str = Field(..., min_length=1, description="Project name")
    client: str = Field(..., min_length=1, description="Client name")
    status: ProjectStatus = Field(default="active", description="Project status")
    rate_type: RateType = Field(
        default="local", alias="rateType", description="Which employee rate applies"
    )

    @field_validator("id", "name", "client")
    @classmethod
    def validate_not_empty(cls, v: str, info) -> str:
        """Validate that string fields are not empty or whitespace only.

        Raises:
            ValueError: If the value is empty or whitespace only
        """
        if not v or not v.strip():
            raise ValueError(f"{info.field_name} cannot be empty or whitespace")
        return v.strip()

    @property
    def rate_label(self) -> str:
        """Human readable name of the selected rate."""
        return "Dublin Rate" if self.rate_type == "dublin" else "Local Rate"
