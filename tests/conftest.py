"""
Pytest Configuration and Shared Test Fixtures

This module provides pytest configuration and reusable fixtures for all tests.
All fixtures defined here are automatically available to all test files.
"""

import os
import sys
from unittest.mock import MagicMock

import pytest

# Add project root to sys.path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from tests.test_fixtures import InMemoryRedis, StoreTestFactory  # noqa: E402

# ============================================================================
# Pytest Configuration
# ============================================================================

# pytest-asyncio runs in auto mode (pyproject.toml), so async tests and
# fixtures need no explicit marker


# ============================================================================
# Mock Configuration Fixtures
# ============================================================================


@pytest.fixture
def mock_settings():
    """
    Mock settings for testing.

    Returns a MagicMock with the attribute groups CacheOptions.from_settings reads.
    """
    from fastcache.core.config.settings import Settings

    settings = MagicMock(spec=Settings)

    settings.redis.REDIS_HOST = "redis.test"
    settings.redis.REDIS_PORT = 6380
    settings.redis.REDIS_DB = 2
    settings.redis.REDIS_PASSWORD = None
    settings.redis.REDIS_MAX_CONNECTIONS = 10
    settings.redis.REDIS_SOCKET_TIMEOUT = 5
    settings.redis.REDIS_SOCKET_CONNECT_TIMEOUT = 5
    settings.redis.REDIS_HEALTH_CHECK_INTERVAL = 30

    settings.cache.CACHE_PREFIX = "test:"
    settings.cache.CACHE_DEFAULT_TTL = 120
    settings.cache.CACHE_FLUSH_SCAN_COUNT = 50

    settings.lock.LOCK_TTL_MS = 1000
    settings.lock.LOCK_CLOCK_DRIFT_FACTOR = 0.01

    settings.logging.LOG_LEVEL = "INFO"
    settings.logging.LOG_FORMAT = "json"

    return settings


# ============================================================================
# Environment-Based Integration Toggles
# ============================================================================


@pytest.fixture(scope="session")
def use_real_redis():
    """Check if real Redis should be used for integration tests."""
    return os.getenv("USE_REAL_REDIS", "0").lower() in ("1", "true", "yes")


# ============================================================================
# Store Fixtures
# ============================================================================


@pytest.fixture
def fake_redis():
    """
    In-memory Redis client double.

    Mimics redis.asyncio.Redis for the commands the store adapter uses.
    """
    return InMemoryRedis()


@pytest.fixture
def failing_redis():
    """Redis client double that raises ConnectionError on every command."""
    return StoreTestFactory.failing_redis_client()


@pytest.fixture
async def store(fake_redis):
    """RedisStore connected to the in-memory client."""
    store = await StoreTestFactory.connected_store(fake_redis)
    yield store
    await store.disconnect()


# ============================================================================
# Facade Fixtures
# ============================================================================


@pytest.fixture
async def cache(fake_redis):
    """Initialized FastCache without a prefix, backed by the in-memory client."""
    from fastcache.infrastructure.cache.fast_cache import FastCache

    cache = FastCache(StoreTestFactory.cache_options(fake_redis))
    await cache.initialize()
    yield cache
    await cache.destroy()


@pytest.fixture
async def prefixed_cache(fake_redis):
    """Initialized FastCache with the "app:" prefix, sharing the in-memory client."""
    from fastcache.infrastructure.cache.fast_cache import FastCache

    cache = FastCache(StoreTestFactory.cache_options(fake_redis, prefix="app:"))
    await cache.initialize()
    yield cache
    await cache.destroy()
