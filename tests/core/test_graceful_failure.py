"""
Tests for the graceful_failure context manager used around question usage
analytics.
"""

import logging
from unittest.mock import MagicMock

import pytest

from placement_service.core.graceful_failure import graceful_failure


@pytest.fixture
def mock_logger():
    """Create a mock logger for testing."""
    return MagicMock(spec=logging.Logger)


class TestGracefulFailure:
    """Tests for the graceful_failure context manager."""

    def test_success_case_no_exception(self, mock_logger):
        """Test that code executes normally when no exception occurs."""
        result = []

        with graceful_failure("record question usage", mock_logger):
            result.append("executed")

        assert result == ["executed"]
        mock_logger.log.assert_not_called()

    def test_exception_is_swallowed(self, mock_logger):
        """Test that exceptions are swallowed and don't propagate."""
        result = []

        with graceful_failure("record question usage", mock_logger):
            raise RuntimeError("analytics store unavailable")

        result.append("continued")
        assert result == ["continued"]

    def test_logs_at_warning_by_default(self, mock_logger):
        """Test that failures are logged at WARNING level by default."""
        with graceful_failure("record question usage", mock_logger):
            raise ValueError("counter overflow")

        mock_logger.log.assert_called_once()
        level, message = mock_logger.log.call_args[0]
        assert level == logging.WARNING
        assert message == "Failed to record question usage: counter overflow"
        assert mock_logger.log.call_args[1]["exc_info"] is False

    def test_custom_log_level_and_exc_info(self, mock_logger):
        """Test custom logging level and traceback flag."""
        with graceful_failure(
            "record question usage",
            mock_logger,
            log_level=logging.ERROR,
            exc_info=True,
        ):
            raise ValueError("error")

        call_args = mock_logger.log.call_args
        assert call_args[0][0] == logging.ERROR
        assert call_args[1]["exc_info"] is True

    def test_context_in_log_message(self, mock_logger):
        """Test that context is rendered into the log message."""
        with graceful_failure(
            "record question usage",
            mock_logger,
            context={"session_id": 12, "question_id": 34},
        ):
            raise ValueError("database error")

        message = mock_logger.log.call_args[0][1]
        assert message == (
            "Failed to record question usage (session_id=12, question_id=34): "
            "database error"
        )

    def test_variables_set_before_failure_persist(self, mock_logger):
        """Test that work done before the exception is kept."""
        recorded = None

        with graceful_failure("record question usage", mock_logger):
            recorded = "partial"
            raise ValueError("error after setting")

        assert recorded == "partial"

    def test_nested_contexts(self, mock_logger):
        """Test that an inner failure does not stop the outer block."""
        results = []

        with graceful_failure("outer operation", mock_logger):
            results.append("outer start")
            with graceful_failure("inner operation", mock_logger):
                raise ValueError("inner error")
            results.append("after inner")

        assert results == ["outer start", "after inner"]
        assert mock_logger.log.call_count == 1

    def test_base_exceptions_propagate(self, mock_logger):
        """Test that only Exception subclasses are swallowed."""
        with pytest.raises(KeyboardInterrupt):
            with graceful_failure("record question usage", mock_logger):
                raise KeyboardInterrupt()

        mock_logger.log.assert_not_called()
