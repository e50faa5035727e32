"""
Google API services used to mirror weekly summaries remotely.

- Service account or Application Default Credentials authentication
- Exponential backoff with jitter and a circuit breaker
- Error classification for log messages and retry decisions
"""

from .error_classifier import ErrorClassifier, ErrorType
from .google_sheets_service import SHEETS_SCOPES, GoogleSheetsService
from .retry_handler import CircuitOpenError, RetryExhaustedError, RetryHandler

__all__ = [
    "ErrorClassifier",
    "ErrorType",
    "GoogleSheetsService",
    "SHEETS_SCOPES",
    "RetryHandler",
    "RetryExhaustedError",
    "CircuitOpenError",
]
