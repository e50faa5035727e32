"""Fixtures for CLI tests."""

import pytest
from click.testing import CliRunner

from labor_cost.cli import cli


@pytest.fixture
def runner():
    """Create a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def invoke(runner, mock_env):
    """Run the CLI against a seeded data directory under tmp_path."""

    def _invoke(*args, **kwargs):
        return runner.invoke(cli, list(args), **kwargs)

    return _invoke
