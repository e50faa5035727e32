"""
Unit tests for retry handler with exponential backoff and circuit breaker.
"""

from unittest.mock import Mock, patch

import pytest
from googleapiclient.errors import HttpError

from labor_cost.services.retry_handler import (
    CircuitOpenError,
    RetryExhaustedError,
    RetryHandler,
)


def http_error(status):
    return HttpError(resp=Mock(status=status), content=b"error")


class TestRetryHandler:
    """Test cases for RetryHandler."""

    @pytest.fixture
    def sleep(self):
        return Mock()

    @pytest.fixture
    def retry_handler(self, sleep):
        """RetryHandler instance with test configuration."""
        return RetryHandler(
            max_retries=3,
            base_delay=0.1,
            max_delay=1.0,
            exponential_base=2,
            jitter_factor=0.0,
            circuit_breaker_threshold=2,
            circuit_breaker_timeout=60.0,
            sleep=sleep,
        )

    def test_initialization_with_defaults(self):
        handler = RetryHandler()

        assert handler.max_retries == 3
        assert handler.base_delay == 1.0
        assert handler.max_delay == 30.0
        assert handler.circuit_breaker_threshold == 5

    def test_successful_execution_no_retry(self, retry_handler, sleep):
        mock_func = Mock(return_value="success")

        assert retry_handler.execute_with_retry(mock_func, 1, key="v") == "success"
        mock_func.assert_called_once_with(1, key="v")
        sleep.assert_not_called()

    def test_retry_on_rate_limit_error(self, retry_handler, sleep):
        mock_func = Mock(side_effect=[http_error(429), http_error(429), "success"])

        assert retry_handler.execute_with_retry(mock_func) == "success"
        assert mock_func.call_count == 3
        assert sleep.call_count == 2

    def test_no_retry_on_client_error(self, retry_handler):
        mock_func = Mock(side_effect=http_error(404))

        with pytest.raises(HttpError):
            retry_handler.execute_with_retry(mock_func)

        mock_func.assert_called_once()

    def test_exponential_backoff(self, retry_handler, sleep):
        mock_func = Mock(side_effect=http_error(500))

        with pytest.raises(RetryExhaustedError) as exc_info:
            retry_handler.execute_with_retry(mock_func)

        assert mock_func.call_count == 4
        assert [c.args[0] for c in sleep.call_args_list] == pytest.approx([0.1, 0.2, 0.4])
        assert isinstance(exc_info.value.last_error, HttpError)

    def test_delay_capped(self, retry_handler):
        assert retry_handler.calculate_delay(10) == pytest.approx(1.0)

    def test_jitter_stays_within_bounds(self):
        handler = RetryHandler(base_delay=1.0, jitter_factor=0.5)

        for _ in range(50):
            assert 0.5 <= handler.calculate_delay(0) <= 1.5

    def test_custom_retry_condition(self, sleep):
        handler = RetryHandler(retry_condition=lambda e: isinstance(e, KeyError), sleep=sleep)
        mock_func = Mock(side_effect=[KeyError("k"), "ok"])

        assert handler.execute_with_retry(mock_func) == "ok"

    def test_circuit_opens_after_threshold(self, retry_handler):
        failing = Mock(side_effect=http_error(503))

        for _ in range(2):
            with pytest.raises(RetryExhaustedError):
                retry_handler.execute_with_retry(failing)

        assert retry_handler.circuit_open
        with pytest.raises(CircuitOpenError):
            retry_handler.execute_with_retry(Mock())

    def test_circuit_half_opens_after_timeout(self, retry_handler):
        failing = Mock(side_effect=http_error(503))
        with patch("labor_cost.services.retry_handler.time.monotonic", return_value=100.0):
            for _ in range(2):
                with pytest.raises(RetryExhaustedError):
                    retry_handler.execute_with_retry(failing)

        with patch("labor_cost.services.retry_handler.time.monotonic", return_value=161.0):
            assert retry_handler.execute_with_retry(Mock(return_value="ok")) == "ok"

        assert not retry_handler.get_retry_statistics()["circuit_breaker_open"]

    def test_reset_circuit_breaker(self, retry_handler):
        failing = Mock(side_effect=http_error(503))
        for _ in range(2):
            with pytest.raises(RetryExhaustedError):
                retry_handler.execute_with_retry(failing)

        retry_handler.reset_circuit_breaker()

        assert not retry_handler.circuit_open

    def test_statistics(self, retry_handler):
        retry_handler.execute_with_retry(Mock(side_effect=[http_error(429), "ok"]))

        stats = retry_handler.get_retry_statistics()

        assert stats["total_calls"] == 1
        assert stats["total_retries"] == 1
        assert stats["total_failures"] == 0
        assert stats["consecutive_failures"] == 0
