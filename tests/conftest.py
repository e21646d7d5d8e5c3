"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import sys
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest

from learnpath.config import Settings
from learnpath.core.models import MasteryRecord, Topic
from learnpath.service import LearningService
from learnpath.store.memory import (
    InMemoryAttemptLog,
    InMemoryContentCatalog,
    InMemoryMasteryStore,
    InMemoryXPLedger,
)

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")
    config.addinivalue_line("markers", "slow: Slow tests")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        # Mark based on test file location
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def now():
    """Fixed evaluation time so due/priority checks are deterministic."""
    return datetime(2024, 3, 15, 12, 0, tzinfo=UTC)


@pytest.fixture
def topics():
    """Catalog topics t1..t4 in catalog order."""
    return [
        Topic(id="t1", name="OSI Model"),
        Topic(id="t2", name="IPv4 Addressing"),
        Topic(id="t3", name="Subnetting"),
        Topic(id="t4", name="VLANs"),
    ]


@pytest.fixture
def sample_records(now):
    """Mastery records for t1..t4 (0.9, 0.2, 0.6, 0.1)."""
    return [
        MasteryRecord("t1", 0.9, 20, 18, 5, now - timedelta(days=2)),
        MasteryRecord("t2", 0.2, 5, 1, 0, now - timedelta(days=3)),
        MasteryRecord("t3", 0.6, 10, 6, 2, now - timedelta(days=1)),
        MasteryRecord("t4", 0.1, 2, 0, 0, now - timedelta(days=10)),
    ]


@pytest.fixture
def settings():
    """Default settings, independent of the environment and any .env file."""
    return Settings(_env_file=None)


@pytest.fixture
def catalog(topics):
    return InMemoryContentCatalog({"ccna": topics})


@pytest.fixture
def store(catalog):
    return InMemoryMasteryStore(catalog)


@pytest.fixture
def attempt_log():
    return InMemoryAttemptLog()


@pytest.fixture
def xp_ledger():
    return InMemoryXPLedger()


@pytest.fixture
def service(store, catalog, attempt_log, settings, xp_ledger):
    return LearningService(store, catalog, attempt_log, settings, xp_ledger)
