"""Base model for all records in the labor cost tracker.

This module provides a base Pydantic model with common configuration
and helpers for converting records to and from their stored form.
"""

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict


class BaseDataModel(BaseModel):
    """Base class for all data models.

    Provides common configuration for:
    - Validation with type checking (lenient coercion of numbers and dates)
    - Stored key names as aliases (e.g. ``hourlyRate``) with field names
      accepted on input as well
    - Validation on assignment

    Example:
        >>> class Worker(BaseDataModel):
        ...     name: str
        >>> Worker(name="Alice").to_record()
        {'name': 'Alice'}
    """

    model_config = ConfigDict(
        # Allow arbitrary types like Decimal, date
        arbitrary_types_allowed=True,
        # Validate on assignment to catch errors early
        validate_assignment=True,
        strict=False,
        extra="forbid",
        # Accept both stored aliases and python field names
        populate_by_name=True,
        frozen=False,
    )

    def to_record(self) -> Dict[str, Any]:
        """Serialize to the JSON-compatible dict used by the record store.

        Returns:
            Dictionary keyed by stored (alias) names
        """
        return self.model_dump(mode="json", by_alias=True)
