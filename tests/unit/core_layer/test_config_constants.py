"""
Unit Tests for Configuration Constants

Tests the configuration constants and stage identifiers.
"""

import pytest

from fastcache.core.config.constants import (
    DEFAULT_LOCK_TTL_MS,
    DEFAULT_TTL_SECONDS,
    FLUSH_ALL_PATTERN,
    FLUSH_SCAN_COUNT,
    LOCK_CLOCK_DRIFT_CONSTANT_MS,
    LOCK_CLOCK_DRIFT_FACTOR,
    LOCK_KEY_PREFIX,
    Stage,
)


@pytest.mark.unit
class TestCacheConstants:
    """Test cache default constants."""

    def test_default_ttl_is_five_minutes(self):
        assert DEFAULT_TTL_SECONDS == 300

    def test_flush_defaults(self):
        """Test flush wildcard and scan batch size."""
        assert FLUSH_ALL_PATTERN == "*"
        assert isinstance(FLUSH_SCAN_COUNT, int)
        assert FLUSH_SCAN_COUNT > 0


@pytest.mark.unit
class TestLockConstants:
    """Test lock-related constants."""

    def test_lock_defaults_are_positive(self):
        assert DEFAULT_LOCK_TTL_MS > 0
        assert LOCK_CLOCK_DRIFT_CONSTANT_MS > 0

    def test_drift_factor_is_a_small_fraction(self):
        assert 0 < LOCK_CLOCK_DRIFT_FACTOR < 1

    def test_lock_key_prefix(self):
        assert LOCK_KEY_PREFIX == "lock:"


@pytest.mark.unit
class TestStage:
    """Test stage identifiers used in structured logs."""

    def test_stages_are_strings(self):
        """Stage members compare equal to their string values."""
        assert Stage.CACHE_HIT == "CACHE.HIT"
        assert isinstance(Stage.LOCK_ACQUIRE.value, str)

    def test_stage_values_are_unique(self):
        values = [stage.value for stage in Stage]
        assert len(set(values)) == len(values)

    def test_stage_values_are_namespaced(self):
        """Every stage is LAYER.EVENT."""
        for stage in Stage:
            layer, _, event = stage.value.partition(".")
            assert layer in {"STORE", "CACHE", "LOCK"}
            assert event
