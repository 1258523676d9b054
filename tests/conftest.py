"""Pytest configuration and shared fixtures.

Usage Guide:
- For records and payloads: import factories from tests.factories
- For fetch/scheduler tests: use the `cache` and `fake_source` fixtures
"""

import pytest

from repo_stars.config import get_settings
from repo_stars.github.cache import ResponseCache
from tests.factories import FakeRepositorySource

# Fast stagger interval for tests (seconds)
TEST_INTERVAL = 0.01


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    """Make every test read settings from its own environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def cache() -> ResponseCache:
    """A fresh response cache, isolated from the process-wide one."""
    return ResponseCache()


@pytest.fixture
def fake_source() -> FakeRepositorySource:
    """Fake transport knowing two repositories."""
    return FakeRepositorySource({"a/b": 10, "c/d": 50})
