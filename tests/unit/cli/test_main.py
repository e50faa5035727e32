"""Unit tests for CLI main entry point."""

from unittest.mock import patch

import pytest

from labor_cost import __version__
from labor_cost.cli import cli, main


class TestCLIMain:
    """Test suite for CLI main entry point."""

    def test_cli_group_exists(self, runner):
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "Usage:" in result.output

    def test_cli_help_text(self, runner):
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "Labor Cost Tracker CLI" in result.output
        assert "Commands:" in result.output

    def test_cli_version_flag(self, runner):
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    @pytest.mark.parametrize(
        "command",
        [
            "employees",
            "projects",
            "log-time",
            "weekly-summary",
            "export-timesheet",
            "payslip",
            "sync-summaries",
        ],
    )
    def test_command_registered(self, runner, command):
        result = runner.invoke(cli, ["--help"])
        assert command in result.output

    def test_unknown_command_shows_error(self, runner):
        result = runner.invoke(cli, ["unknown-command"])
        assert result.exit_code != 0
        assert "No such command" in result.output

    def test_main_configures_logging(self):
        with patch("labor_cost.cli.configure_logging") as mock_configure, patch(
            "labor_cost.cli.cli"
        ) as mock_cli:
            main()

        mock_configure.assert_called_once()
        assert mock_configure.call_args.args[0].log_level in (
            "DEBUG",
            "INFO",
            "WARNING",
            "ERROR",
            "CRITICAL",
        )
        mock_cli.assert_called_once_with()
