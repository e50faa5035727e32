"""
Global pytest configuration and fixtures.
"""
import datetime as dt
from typing import Dict

import pytest

from labor_cost.config import LaborCostConfig, reload_config
from labor_cost.models import Employee, Project, TimeEntry
from labor_cost.storage import (
    InMemoryKeyValueStore,
    LaborCostRepository,
    RecordStore,
)


@pytest.fixture
def test_env_vars(tmp_path) -> Dict[str, str]:
    """Test environment variables for configuration."""
    return {
        'DATA_DIR': str(tmp_path / 'data'),
        'EXPORT_DIR': str(tmp_path / 'exports'),
        'ENVIRONMENT': 'testing',
        'DEBUG': 'true',
        'LOG_LEVEL': 'DEBUG',
        'REMOTE_SYNC_ENABLED': 'false',
    }


@pytest.fixture
def mock_env(test_env_vars, monkeypatch):
    """Mock environment variables for testing."""
    for key, value in test_env_vars.items():
        monkeypatch.setenv(key, value)

    # Clear the global config to force reload with test values
    import labor_cost.config.settings
    labor_cost.config.settings._config = None

    yield test_env_vars

    # Clean up
    labor_cost.config.settings._config = None


@pytest.fixture
def test_config(mock_env) -> LaborCostConfig:
    """Test configuration instance."""
    return reload_config()


@pytest.fixture
def employee() -> Employee:
    """Employee with local rate 45 and Dublin rate 55."""
    return Employee(id='1', name='John Smith', role='Carpenter', hourlyRate=45, dublinRate=55)


@pytest.fixture
def second_employee() -> Employee:
    return Employee(id='2', name='Sarah Johnson', role='Electrician', hourlyRate=55, dublinRate=65)


@pytest.fixture
def local_project() -> Project:
    return Project(id='1', name='Kitchen Renovation', client='Smith Residence', rateType='local')


@pytest.fixture
def dublin_project() -> Project:
    return Project(id='2', name='Bathroom Remodel', client='Johnson Home', rateType='dublin')


@pytest.fixture
def dublin_week_entries():
    """8h on Tuesday and 4h on Wednesday against the Dublin project."""
    return [
        TimeEntry(id='e1', employeeId='1', projectId='2', date=dt.date(2025, 10, 28), hours=8),
        TimeEntry(id='e2', employeeId='1', projectId='2', date=dt.date(2025, 10, 29), hours=4),
    ]


@pytest.fixture
def memory_store() -> RecordStore:
    """Record store over an empty in-memory key-value store (loads seeds)."""
    return RecordStore(InMemoryKeyValueStore())


@pytest.fixture
def repository(memory_store) -> LaborCostRepository:
    """Repository loaded with the seed records."""
    return LaborCostRepository(memory_store)


# Pytest configuration for different test types
def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "slow: mark test as slow running"
    )


def pytest_collection_modifyitems(config, items):
    """Modify test collection to add markers based on location."""
    for item in items:
        # Add unit marker for tests in tests/unit/
        if "tests/unit/" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
