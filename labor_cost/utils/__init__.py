"""Shared utilities."""

from .logging_utils import (
    ContextFilter,
    LogContext,
    current_context,
    generate_correlation_id,
    get_correlation_id,
    log_timing,
    sanitize_sensitive_data,
)

__all__ = [
    "ContextFilter",
    "LogContext",
    "current_context",
    "generate_correlation_id",
    "get_correlation_id",
    "log_timing",
    "sanitize_sensitive_data",
]
