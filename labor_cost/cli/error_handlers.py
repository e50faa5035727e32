"""Error handling for CLI commands."""

import sys
import traceback
from typing import Optional

import click
from googleapiclient.errors import HttpError
from pydantic import ValidationError

from labor_cost.cli.utils.formatters import format_error, format_warning
from labor_cost.errors import (
    ExportError,
    RecordNotFoundError,
    StorageError,
    SyncError,
)


class CLIError(Exception):
    """Base exception for CLI errors with user-friendly messages."""

    exit_code = 255
    label = "Error"

    def __init__(self, message: str, recovery_hint: Optional[str] = None):
        """
        Initialize CLI error.

        Args:
            message: Error message to display
            recovery_hint: Optional hint for recovering from the error
        """
        self.message = message
        self.recovery_hint = recovery_hint
        super().__init__(message)


class ConfigurationError(CLIError):
    """Error related to configuration issues."""

    exit_code = 1
    label = "Configuration Error"


class APIError(CLIError):
    """Error talking to the remote summary table."""

    exit_code = 2
    label = "API Error"


class DataValidationError(CLIError):
    """Invalid input or unknown record."""

    exit_code = 3
    label = "Data Validation Error"


class ProcessingError(CLIError):
    """Storage, export or sync processing failed."""

    exit_code = 4
    label = "Processing Error"


_HTTP_ERRORS = {
    401: (5, "Authentication Failed", "Check the Google service account settings in .env"),
    403: (6, "Permission Denied", "Share the summary spreadsheet with the service account"),
    404: (7, "Spreadsheet Not Found", "Verify SUMMARY_SPREADSHEET_ID"),
    429: (8, "Rate Limit Exceeded", "Wait a few minutes before retrying"),
}


def to_cli_error(error: Exception) -> Optional[CLIError]:
    """Translate domain exceptions into CLI errors; None if not applicable."""
    if isinstance(error, CLIError):
        return error
    if isinstance(error, RecordNotFoundError):
        return DataValidationError(
            str(error), f"Run 'labor-cost {error.kind}s list' to see valid ids"
        )
    if isinstance(error, ValidationError):
        messages = "; ".join(
            f"{'.'.join(str(p) for p in e['loc']) or 'value'}: {e['msg']}"
            for e in error.errors()
        )
        return DataValidationError(messages)
    if isinstance(error, ValueError):
        return DataValidationError(str(error))
    if isinstance(error, StorageError):
        return ProcessingError(str(error), "Check that DATA_DIR is writable")
    if isinstance(error, ExportError):
        return ProcessingError(str(error), "Check that the export directory is writable")
    if isinstance(error, SyncError):
        return APIError(str(error), "Check network access and the summary spreadsheet")
    return None


def _echo(message: str, hint: Optional[str]) -> None:
    click.echo(format_error(message), err=True)
    if hint:
        click.echo(format_warning(f"Hint: {hint}"), err=True)


def handle_cli_error(error: BaseException, debug: bool = False) -> int:
    """
    Report an error and return the exit code for it.

    Exit codes: 1 configuration, 2 remote API, 3 validation, 4 processing,
    5-9 Google HTTP errors, 130 cancelled, 255 unexpected.

    Args:
        error: The exception that occurred
        debug: Whether to show the full stack trace

    Returns:
        Exit code
    """
    if isinstance(error, click.Abort):
        click.echo(format_warning("\nOperation cancelled by user"), err=True)
        return 130

    if isinstance(error, HttpError):
        status = error.resp.status
        code, message, hint = _HTTP_ERRORS.get(
            status, (9, f"Google API Error (HTTP {status})", None)
        )
        _echo(message, hint)
        return code

    cli_error = to_cli_error(error)
    if cli_error is not None:
        _echo(f"{cli_error.label}: {cli_error.message}", cli_error.recovery_hint)
        return cli_error.exit_code

    _echo(f"Unexpected Error: {type(error).__name__}: {error}", None)
    if debug:
        click.echo("\nFull stack trace:", err=True)
        click.echo(
            "".join(traceback.format_exception(type(error), error, error.__traceback__)),
            err=True,
        )
    else:
        click.echo(format_warning("Run with --debug for the full stack trace"), err=True)
    return 255


def debug_enabled() -> bool:
    """Whether the root command was invoked with ``--debug``."""
    ctx = click.get_current_context(silent=True)
    if ctx is None:
        return False
    return bool(ctx.find_root().params.get("debug"))


class with_error_handling:
    """
    Context manager turning exceptions into styled messages and exit codes.

    Example:
        @click.command()
        def my_command():
            with with_error_handling():
                ...
    """

    def __init__(self, debug: Optional[bool] = None):
        self.debug = debug

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_val is None or isinstance(exc_val, (click.exceptions.Exit, SystemExit)):
            return False
        if isinstance(exc_val, click.UsageError):
            return False
        debug = debug_enabled() if self.debug is None else self.debug
        sys.exit(handle_cli_error(exc_val, debug))
