"""
Unit Tests for Logging Module

Tests logger configuration, processors and the log_stage utility.
"""

from unittest.mock import MagicMock

import pytest

from fastcache.core.config.constants import Stage
from fastcache.core.logging.logger import (
    add_log_level_name,
    add_timestamp,
    get_logger,
    log_stage,
    setup_logging,
)


@pytest.mark.unit
class TestLoggerCreation:
    """Test logger creation and configuration."""

    def test_get_logger_returns_logger_instance(self):
        logger = get_logger(__name__)
        # structlog logger is not a standard logging.Logger
        assert logger is not None
        assert hasattr(logger, "info")

    def test_setup_logging_json(self):
        """Test that setup_logging configures without error."""
        setup_logging(log_level="DEBUG", log_format="json")
        get_logger("fastcache.test").info("configured", stage="TEST")

    def test_setup_logging_console(self):
        setup_logging(log_level="INFO", log_format="console")
        get_logger("fastcache.test").info("configured", stage="TEST")


@pytest.mark.unit
class TestProcessors:
    """Test custom structlog processors."""

    def test_add_timestamp(self):
        event = add_timestamp(None, "info", {"event": "x"})
        assert event["timestamp"].endswith("Z")

    def test_add_log_level_name(self):
        event = add_log_level_name(None, "info", {"level": "warning"})
        assert event["level"] == "WARNING"

    def test_add_log_level_name_without_level(self):
        assert add_log_level_name(None, "info", {"event": "x"}) == {"event": "x"}


@pytest.mark.unit
class TestLogStageFunction:
    """Test the log_stage utility function."""

    def test_log_stage_calls_logger(self):
        mock_logger = MagicMock()

        log_stage(mock_logger, "1", "Test Stage", key="foo")

        mock_logger.info.assert_called_once()
        call_args = mock_logger.info.call_args[0]
        call_kwargs = mock_logger.info.call_args[1]

        assert call_args[0] == "Test Stage"
        assert call_kwargs["stage"] == "1"
        assert call_kwargs["key"] == "foo"

    def test_log_stage_unwraps_stage_enum(self):
        mock_logger = MagicMock()

        log_stage(mock_logger, Stage.CACHE_HIT, "withCache hit")

        assert mock_logger.info.call_args[1]["stage"] == "CACHE.HIT"

    @pytest.mark.parametrize("level", ["debug", "info", "warning", "error", "critical"])
    def test_log_stage_with_different_levels(self, level):
        mock_logger = MagicMock()

        log_stage(mock_logger, Stage.LOCK_ACQUIRE, "message", level=level)

        getattr(mock_logger, level).assert_called_once()

    def test_log_stage_level_is_case_insensitive(self):
        mock_logger = MagicMock()

        log_stage(mock_logger, Stage.STORE_COMMAND, "message", level="WARNING")

        mock_logger.warning.assert_called_once()
