"""Unit tests for structured logging configuration."""

from unittest.mock import MagicMock, patch

import pytest

from blob_retention.observability.logging import (
    StructuredLogger,
    correlation_id_scope,
    get_correlation_id,
    get_logger,
    request_context_scope,
    setup_logging,
)


@pytest.mark.unit
class TestStructuredLogger:
    """Tests for StructuredLogger class."""

    def test_init(self):
        logger = StructuredLogger()
        assert logger._configured is False

    @patch("blob_retention.observability.logging.logging.basicConfig")
    @patch("blob_retention.observability.logging.structlog.configure")
    def test_setup_logging_json_format(self, mock_configure, mock_basic_config):
        """Test setup with JSON format."""
        logger = StructuredLogger()
        logger.setup_logging(json_format=True, log_level="INFO")

        assert logger._configured is True
        mock_basic_config.assert_called_once()
        processors = mock_configure.call_args[1]["processors"]
        assert "JSONRenderer" in type(processors[-1]).__name__

    @patch("blob_retention.observability.logging.logging.basicConfig")
    @patch("blob_retention.observability.logging.structlog.configure")
    def test_setup_logging_console_format(self, mock_configure, mock_basic_config):
        """Test setup with console format."""
        logger = StructuredLogger()
        logger.setup_logging(json_format=False, log_level="DEBUG")

        processors = mock_configure.call_args[1]["processors"]
        assert "ConsoleRenderer" in type(processors[-1]).__name__

    @patch("blob_retention.observability.logging.logging.basicConfig")
    @patch("blob_retention.observability.logging.structlog.configure")
    def test_setup_logging_with_extra_processors(self, mock_configure, mock_basic_config):
        logger = StructuredLogger()
        extra_processor = MagicMock()

        logger.setup_logging(extra_processors=[extra_processor])

        processors = mock_configure.call_args[1]["processors"]
        assert extra_processor in processors

    @patch("blob_retention.observability.logging.logging.basicConfig")
    @patch("blob_retention.observability.logging.structlog.configure")
    def test_setup_logging_already_configured(self, mock_configure, mock_basic_config):
        logger = StructuredLogger()
        logger._configured = True

        logger.setup_logging(json_format=True)

        mock_configure.assert_not_called()

    def test_add_correlation_id(self):
        logger = StructuredLogger()

        with correlation_id_scope("run-123"):
            result = logger._add_correlation_id(None, "info", {})

        assert result == {"correlation_id": "run-123"}

    def test_add_correlation_id_outside_scope(self):
        logger = StructuredLogger()

        assert logger._add_correlation_id(None, "info", {}) == {}

    def test_add_request_context(self):
        logger = StructuredLogger()

        with request_context_scope(trigger="cron", dry_run=True):
            result = logger._add_request_context(None, "info", {"event": "x"})

        assert result == {"event": "x", "trigger": "cron", "dry_run": True}


@pytest.mark.unit
class TestContextScopes:
    """Tests for context variable scopes."""

    def test_correlation_id_scope_resets(self):
        assert get_correlation_id() is None

        with correlation_id_scope("outer"):
            with correlation_id_scope("inner"):
                assert get_correlation_id() == "inner"
            assert get_correlation_id() == "outer"

        assert get_correlation_id() is None

    def test_request_context_scope_resets(self):
        logger = StructuredLogger()

        with request_context_scope(trigger="cron"):
            pass

        assert logger._add_request_context(None, "info", {}) == {}


@pytest.mark.unit
class TestModuleFunctions:
    """Tests for module-level helpers."""

    @patch("blob_retention.observability.logging.structlog.configure")
    @patch("blob_retention.observability.logging.logging.basicConfig")
    def test_setup_logging_returns_configured_logger(self, mock_basic_config, mock_configure):
        structured = setup_logging(json_format=False, log_level="WARNING")

        assert isinstance(structured, StructuredLogger)
        assert structured._configured is True

    def test_get_logger(self):
        logger = get_logger("blob_retention.tests")

        assert hasattr(logger, "info")
        assert hasattr(logger, "error")
