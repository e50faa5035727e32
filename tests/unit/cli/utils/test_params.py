"""Unit tests for custom click parameter types."""

from decimal import Decimal

import click
import pytest

from labor_cost.cli.utils.params import ASSIGNMENT, DECIMAL


class TestDecimalParamType:
    @pytest.mark.parametrize("value,expected", [("45", Decimal("45")), (" 52.5 ", Decimal("52.5")), ("0", Decimal("0"))])
    def test_valid_values(self, value, expected):
        assert DECIMAL.convert(value, None, None) == expected

    def test_decimal_passes_through(self):
        assert DECIMAL.convert(Decimal("1.5"), None, None) == Decimal("1.5")

    @pytest.mark.parametrize("value", ["abc", "-5", "NaN", "Infinity"])
    def test_invalid_values(self, value):
        with pytest.raises(click.BadParameter):
            DECIMAL.convert(value, None, None)


class TestAssignmentParamType:
    def test_valid_assignment(self):
        assert ASSIGNMENT.convert("1=8", None, None) == ("1", Decimal("8"))

    def test_whitespace_stripped(self):
        assert ASSIGNMENT.convert(" 2 = 6.5 ", None, None) == ("2", Decimal("6.5"))

    def test_tuple_passes_through(self):
        assert ASSIGNMENT.convert(("3", Decimal("4")), None, None) == ("3", Decimal("4"))

    @pytest.mark.parametrize("value", ["1", "=8", "1=eight", "1=", "1=NaN", "1=Infinity", "1=-2"])
    def test_invalid_assignment(self, value):
        with pytest.raises(click.BadParameter):
            ASSIGNMENT.convert(value, None, None)
