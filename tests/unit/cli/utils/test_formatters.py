"""Unit tests for CLI output formatters."""

from labor_cost.cli.utils.formatters import (
    format_error,
    format_heading,
    format_info,
    format_success,
    format_table,
    format_warning,
)


class TestFormatters:
    """Test suite for CLI output formatters."""

    def test_format_success_contains_message(self):
        result = format_success("Logged 2 entries")
        assert "Logged 2 entries" in result
        assert "✓" in result

    def test_format_error_contains_message(self):
        result = format_error("Employee '9' not found")
        assert "Employee '9' not found" in result
        assert "✗" in result

    def test_format_warning_contains_message(self):
        assert "No hours to log" in format_warning("No hours to log")

    def test_format_info_contains_message(self):
        assert "Dry run" in format_info("Dry run")

    def test_format_heading_contains_message(self):
        assert "John Smith" in format_heading("John Smith")

    def test_format_table_layout(self):
        result = format_table(["Week", "Hours"], [["2025-10-26", "12.0"]], align_right=[1])

        assert result.splitlines() == [
            "+------------+-------+",
            "| Week       | Hours |",
            "+------------+-------+",
            "| 2025-10-26 |  12.0 |",
            "+------------+-------+",
        ]

    def test_format_table_with_empty_rows(self):
        result = format_table(["Name", "Rate"], [])

        assert "Name" in result
        assert len(result.splitlines()) == 3

    def test_format_table_truncates_long_values(self):
        result = format_table(["Project"], [["x" * 100]], max_width=10)

        assert "x" * 10 in result
        assert "x" * 11 not in result

    def test_format_table_converts_cells(self):
        result = format_table(["Entries"], [[3]])
        assert "3" in result

    def test_format_table_short_rows_padded(self):
        result = format_table(["A", "B"], [["only"]])
        assert "only" in result

    def test_format_table_without_headers(self):
        assert format_table([], [["x"]]) == ""
