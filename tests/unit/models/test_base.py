"""Unit tests for base model functionality."""

from decimal import Decimal

import pytest
from pydantic import Field, ValidationError

from labor_cost.models.base import BaseDataModel


class Rated(BaseDataModel):
    name: str
    hourly_rate: Decimal = Field(..., alias="hourlyRate")


class TestBaseDataModel:
    """Test the shared model configuration."""

    def test_accepts_field_name_and_alias(self):
        """Both the stored alias and the python field name populate a field."""
        assert Rated(name="a", hourlyRate=10).hourly_rate == Decimal("10")
        assert Rated(name="a", hourly_rate=10).hourly_rate == Decimal("10")

    def test_to_record_uses_aliases_and_json_types(self):
        """Stored records use alias keys and JSON-compatible values."""
        record = Rated(name="a", hourlyRate=Decimal("12.5")).to_record()

        assert record == {"name": "a", "hourlyRate": "12.5"}

    def test_extra_fields_rejected(self):
        """Unknown keys are a validation error."""
        with pytest.raises(ValidationError):
            Rated(name="a", hourlyRate=1, colour="red")

    def test_validate_on_assignment(self):
        """Assignments are validated like construction."""
        model = Rated(name="a", hourlyRate=1)

        with pytest.raises(ValidationError):
            model.hourly_rate = "not a number"
