"""
Classification of remote summary table errors into transient and permanent.
"""

import logging
import socket
from collections import Counter
from enum import Enum
from typing import Dict

import requests.exceptions
from googleapiclient.errors import HttpError

from labor_cost.errors import StorageError, SyncError

logger = logging.getLogger(__name__)

_NETWORK_ERRORS = (
    socket.timeout,
    ConnectionError,
    requests.exceptions.ConnectionError,
    requests.exceptions.Timeout,
)


class ErrorType(Enum):
    """Classification of error types."""

    TRANSIENT = "transient"  # 429, 5xx, network errors
    PERMANENT = "permanent"  # 4xx except 429, bad rows, local storage
    UNKNOWN = "unknown"


class ErrorClassifier:
    """
    Classifies errors raised while talking to the remote summary table.

    Transient errors are worth retrying at the transport level. Permanent
    and unknown errors are reported to the caller as a failed write.

    Example:
        >>> classifier = ErrorClassifier()
        >>> classifier.is_transient(socket.timeout())
        True
    """

    def __init__(self):
        self._counts: Counter = Counter()

    def classify(self, exception: BaseException) -> ErrorType:
        """
        Classify an exception.

        Args:
            exception: The exception to classify

        Returns:
            ErrorType classification
        """
        error_type = self._classify(exception)
        self._counts[error_type.value] += 1
        return error_type

    def _classify(self, exception: BaseException) -> ErrorType:
        if isinstance(exception, HttpError):
            status = exception.resp.status
            if status == 429 or 500 <= status < 600:
                return ErrorType.TRANSIENT
            if 400 <= status < 500:
                return ErrorType.PERMANENT

        if isinstance(exception, _NETWORK_ERRORS):
            return ErrorType.TRANSIENT

        if isinstance(exception, (SyncError, StorageError, ValueError)):
            return ErrorType.PERMANENT

        return ErrorType.UNKNOWN

    def is_transient(self, exception: BaseException) -> bool:
        return self._classify(exception) == ErrorType.TRANSIENT

    def describe(self, exception: BaseException) -> str:
        """
        Human-readable one-line description of an error.

        Args:
            exception: The exception to describe

        Returns:
            Description including the classification
        """
        error_type = self.classify(exception)

        if isinstance(exception, HttpError):
            status = exception.resp.status
            if status == 429:
                label = "Rate limited (HTTP 429)"
            elif status in (401, 403):
                label = f"Access denied to summary sheet (HTTP {status})"
            elif status == 404:
                label = "Summary sheet not found (HTTP 404)"
            elif 500 <= status < 600:
                label = f"Server error (HTTP {status})"
            else:
                label = f"Request rejected (HTTP {status})"
        elif isinstance(exception, (socket.timeout, requests.exceptions.Timeout)):
            label = "Network timeout"
        elif isinstance(exception, _NETWORK_ERRORS):
            label = "Network connection error"
        else:
            label = f"{type(exception).__name__}: {exception}"

        return f"{label} - {error_type.value}"

    def get_statistics(self) -> Dict[str, int]:
        """Counts per error type plus a total."""
        stats = {t.value: self._counts.get(t.value, 0) for t in ErrorType}
        stats["total"] = sum(self._counts.values())
        return stats
