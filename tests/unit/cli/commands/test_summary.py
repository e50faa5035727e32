"""Unit tests for the weekly-summary command."""

import json


class TestWeeklySummaryCommand:
    """Test suite for weekly-summary."""

    def test_employee_summary(self, invoke):
        result = invoke("weekly-summary", "1")

        assert result.exit_code == 0
        assert "John Smith (Carpenter)" in result.output
        assert "Local Rate: €45 | Dublin Rate: €55" in result.output
        assert "Total: 12.0 h, €580.00" in result.output
        assert "Sunday 26 Oct 2025 - Saturday 1 Nov 2025" in result.output

    def test_employee_project_breakdown(self, invoke):
        result = invoke("weekly-summary", "1")

        assert "Projects (2)" in result.output
        lines = result.output.splitlines()
        kitchen = next(l for l in lines if "Smith Residence" in l)
        bathroom = next(l for l in lines if "Johnson Home" in l)
        assert "8.0" in kitchen and "€360.00" in kitchen
        # Dublin project priced at the Dublin rate
        assert "4.0" in bathroom and "€220.00" in bathroom

    def test_configured_currency_symbol(self, invoke, monkeypatch):
        monkeypatch.setenv("CURRENCY_SYMBOL", "$")

        result = invoke("weekly-summary", "1")

        assert "Local Rate: $45 | Dublin Rate: $55" in result.output
        assert "Total: 12.0 h, $580.00" in result.output
        assert "€" not in result.output

    def test_details_lists_entries(self, invoke):
        result = invoke("weekly-summary", "1", "--details")

        assert result.exit_code == 0
        assert "Tuesday 28 Oct 2025" in result.output
        assert "Kitchen Renovation" in result.output
        assert "Bathroom Remodel" in result.output
        assert "€360.00" in result.output
        assert "€220.00" in result.output

    def test_employee_without_entries(self, invoke):
        result = invoke("weekly-summary", "3")

        assert result.exit_code == 0
        assert "No time logged for this employee." in result.output

    def test_missing_project_policy(self, invoke, test_config):
        invoke("employees", "list")
        entries_file = test_config.data_dir / "timeEntries.json"
        entries = json.loads(entries_file.read_text())
        entries.append(
            {"id": "x1", "employeeId": "1", "projectId": "gone", "date": "2025-10-30", "hours": 5}
        )
        entries_file.write_text(json.dumps(entries))

        included = invoke("weekly-summary", "1")
        excluded = invoke("weekly-summary", "1", "--missing", "exclude")

        assert "Total: 17.0 h, €580.00" in included.output
        assert "Total: 12.0 h, €580.00" in excluded.output

    def test_all_employees_matrix(self, invoke):
        result = invoke("weekly-summary", "--all")

        assert result.exit_code == 0
        assert "2025-10-26" in result.output
        assert "John Smith" in result.output
        assert "Sarah Johnson" in result.output
        assert "Mike Davis" not in result.output

    def test_all_employees_hours(self, invoke):
        result = invoke("weekly-summary", "--all", "--value", "total_hours")

        assert result.exit_code == 0
        assert "12" in result.output

    def test_employee_id_required(self, invoke):
        result = invoke("weekly-summary")

        assert result.exit_code == 3
        assert "EMPLOYEE_ID is required" in result.output

    def test_unknown_employee(self, invoke):
        result = invoke("weekly-summary", "99")

        assert result.exit_code == 3
        assert "Employee '99' not found" in result.output
