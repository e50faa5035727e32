"""
Transport-level retries for remote summary table calls.

Exponential backoff with jitter, plus a circuit breaker that stops calling
the remote table after repeated failures.
"""

import logging
import random
import threading
import time
from typing import Any, Callable, Optional

from labor_cost.errors import SyncError
from labor_cost.services.error_classifier import ErrorClassifier

logger = logging.getLogger(__name__)


class RetryExhaustedError(SyncError):
    """Raised when all retry attempts have been used up."""

    def __init__(self, message: str, last_error: Optional[BaseException] = None):
        super().__init__(message)
        self.last_error = last_error


class CircuitOpenError(SyncError):
    """Raised when the circuit breaker is open."""

    pass


class RetryHandler:
    """
    Retries transient failures with exponential backoff and jitter.

    Only errors the retry condition accepts are retried; by default that is
    whatever ``ErrorClassifier`` classifies as transient. Anything else is
    raised immediately.

    Example:
        >>> handler = RetryHandler(max_retries=2, base_delay=0.5)
        >>> handler.execute_with_retry(request.execute)
    """

    def __init__(
        self,
        max_retries: int = 3,
        base_delay: float = 1.0,
        max_delay: float = 30.0,
        exponential_base: float = 2,
        jitter_factor: float = 0.1,
        circuit_breaker_threshold: int = 5,
        circuit_breaker_timeout: float = 60.0,
        retry_condition: Optional[Callable[[BaseException], bool]] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Initialize retry handler.

        Args:
            max_retries: Retries after the first attempt
            base_delay: Delay before the first retry (seconds)
            max_delay: Upper bound for any single delay (seconds)
            exponential_base: Growth factor between retries
            jitter_factor: Random spread applied to each delay (0.0 to 1.0)
            circuit_breaker_threshold: Consecutive exhausted calls before the
                circuit opens
            circuit_breaker_timeout: Seconds before an open circuit lets a
                call through again
            retry_condition: Predicate deciding whether an error is retried
            sleep: Sleep function, replaceable in tests
        """
        self.max_retries = max_retries
        self.base_delay = base_delay
        self.max_delay = max_delay
        self.exponential_base = exponential_base
        self.jitter_factor = jitter_factor
        self.circuit_breaker_threshold = circuit_breaker_threshold
        self.circuit_breaker_timeout = circuit_breaker_timeout
        self.retry_condition = retry_condition or ErrorClassifier().is_transient
        self._sleep = sleep

        self._opened_at: Optional[float] = None
        self._consecutive_failures = 0

        self._total_calls = 0
        self._total_retries = 0
        self._total_failures = 0

        self._lock = threading.Lock()

    def calculate_delay(self, attempt: int) -> float:
        """
        Delay before retry number ``attempt`` (0-based).

        Returns:
            Delay in seconds, never negative
        """
        delay = min(self.base_delay * (self.exponential_base**attempt), self.max_delay)
        jitter = random.uniform(-self.jitter_factor, self.jitter_factor) * delay
        return max(0.0, delay + jitter)

    @property
    def circuit_open(self) -> bool:
        with self._lock:
            if self._opened_at is None:
                return False
            if time.monotonic() - self._opened_at >= self.circuit_breaker_timeout:
                logger.info("Circuit breaker half-open, allowing a trial call")
                return False
            return True

    def _record_success(self):
        with self._lock:
            self._consecutive_failures = 0
            if self._opened_at is not None:
                logger.info("Circuit breaker closed")
                self._opened_at = None

    def _record_failure(self):
        with self._lock:
            self._consecutive_failures += 1
            self._total_failures += 1
            if (
                self._opened_at is None
                and self._consecutive_failures >= self.circuit_breaker_threshold
            ):
                logger.warning(
                    f"Circuit breaker opened after "
                    f"{self._consecutive_failures} failed calls"
                )
                self._opened_at = time.monotonic()

    def execute_with_retry(self, func: Callable, *args, **kwargs) -> Any:
        """
        Call ``func`` with retries.

        Args:
            func: Callable to execute
            *args: Positional arguments for ``func``
            **kwargs: Keyword arguments for ``func``

        Returns:
            Whatever ``func`` returns

        Raises:
            CircuitOpenError: If the circuit breaker is open
            RetryExhaustedError: If every attempt failed with a retryable error
            Exception: The original error when it is not retryable
        """
        with self._lock:
            self._total_calls += 1

        if self.circuit_open:
            raise CircuitOpenError("Remote summary table unavailable (circuit open)")

        func_name = getattr(func, "__name__", repr(func))

        for attempt in range(self.max_retries + 1):
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                if not self.retry_condition(e):
                    logger.debug(f"Not retrying {func_name}: {type(e).__name__}")
                    raise

                if attempt >= self.max_retries:
                    logger.warning(
                        f"Giving up on {func_name} after {self.max_retries} retries"
                    )
                    self._record_failure()
                    raise RetryExhaustedError(
                        f"Max retries ({self.max_retries}) exceeded. "
                        f"Last error: {type(e).__name__}: {e}",
                        last_error=e,
                    ) from e

                delay = self.calculate_delay(attempt)
                logger.debug(
                    f"Retrying {func_name} in {delay:.2f}s "
                    f"(attempt {attempt + 2}/{self.max_retries + 1}): {e}"
                )
                with self._lock:
                    self._total_retries += 1
                self._sleep(delay)
            else:
                if attempt:
                    logger.info(f"{func_name} succeeded after {attempt} retries")
                self._record_success()
                return result

    def get_retry_statistics(self) -> dict:
        with self._lock:
            return {
                "total_calls": self._total_calls,
                "total_retries": self._total_retries,
                "total_failures": self._total_failures,
                "circuit_breaker_open": self._opened_at is not None,
                "consecutive_failures": self._consecutive_failures,
            }

    def reset_circuit_breaker(self):
        """Manually close the circuit breaker."""
        with self._lock:
            self._opened_at = None
            self._consecutive_failures = 0
        logger.info("Circuit breaker manually reset")
