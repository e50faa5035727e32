"""Structured logging helpers: per-thread context fields and redaction."""

import functools
import logging
import threading
import time
import uuid
from typing import Any, Callable, Dict, Optional

_thread_local = threading.local()

SENSITIVE_FIELDS = {
    "password",
    "token",
    "secret",
    "private_key",
    "client_email",
    "credentials",
    "authorization",
}

REDACTED = "***REDACTED***"


def generate_correlation_id() -> str:
    """Unique id tying together the log lines of one sync run."""
    return uuid.uuid4().hex[:12]


def current_context() -> Dict[str, Any]:
    """Copy of the context fields active in this thread."""
    return dict(getattr(_thread_local, "context", {}))


def get_correlation_id() -> Optional[str]:
    return current_context().get("correlation_id")


class LogContext:
    """
    Context manager adding structured fields to log records.

    Fields live in thread-local storage, so a worker thread only sees the
    fields it set itself. Nested contexts merge; leaving a context restores
    the previous fields.

    Example:
        with LogContext(employee_id="1", week_start="2025-10-26"):
            logger.info("Publishing weekly summary")
    """

    def __init__(self, **fields):
        self.fields = fields
        self._previous: Optional[Dict[str, Any]] = None

    def __enter__(self):
        self._previous = current_context()
        _thread_local.context = {**self._previous, **self.fields}
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        _thread_local.context = self._previous or {}


class ContextFilter(logging.Filter):
    """Copies the active LogContext fields onto each log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in current_context().items():
            setattr(record, key, value)
        return True


def sanitize_sensitive_data(data: Any) -> Any:
    """
    Redact values of sensitive keys, recursing into nested dictionaries.

    Args:
        data: Dictionary to sanitize; other values are returned unchanged

    Returns:
        A sanitized copy

    Example:
        >>> sanitize_sensitive_data({"private_key": "abc", "project_id": "p"})
        {'private_key': '***REDACTED***', 'project_id': 'p'}
    """
    if not isinstance(data, dict):
        return data

    sanitized: Dict[str, Any] = {}
    for key, value in data.items():
        if any(s in str(key).lower() for s in SENSITIVE_FIELDS):
            sanitized[key] = REDACTED if value is not None else None
        else:
            sanitized[key] = sanitize_sensitive_data(value)
    return sanitized


def log_timing(func: Optional[Callable] = None, *, level: str = "DEBUG") -> Callable:
    """
    Decorator logging how long a function took, and any exception it raised.

    Usable as ``@log_timing`` or ``@log_timing(level="INFO")``.
    """

    def decorator(f: Callable) -> Callable:
        @functools.wraps(f)
        def wrapper(*args, **kwargs):
            logger = logging.getLogger(f.__module__)
            log_level = getattr(logging, level.upper())
            started = time.perf_counter()
            try:
                result = f(*args, **kwargs)
            except Exception as e:
                logger.error(f"{f.__name__} failed: {type(e).__name__}: {e}")
                raise
            elapsed = time.perf_counter() - started
            logger.log(log_level, f"{f.__name__} finished in {elapsed:.3f}s")
            return result

        return wrapper

    if func is None:
        return decorator
    return decorator(func)
