"""Output formatting utilities for CLI."""

from typing import Any, List, Optional, Sequence

import click


def format_success(message: str) -> str:
    """Format a success message in green."""
    return click.style(f"✓ {message}", fg="green", bold=True)


def format_error(message: str) -> str:
    """Format an error message in red."""
    return click.style(f"✗ {message}", fg="red", bold=True)


def format_warning(message: str) -> str:
    """Format a warning message in yellow."""
    return click.style(f"⚠ {message}", fg="yellow", bold=True)


def format_info(message: str) -> str:
    """Format an info message in blue."""
    return click.style(f"ℹ {message}", fg="blue")


def format_heading(message: str) -> str:
    return click.style(message, bold=True, underline=True)


def format_table(
    headers: Sequence[str],
    rows: Sequence[Sequence[Any]],
    max_width: int = 40,
    align_right: Optional[Sequence[int]] = None,
) -> str:
    """Format data as a bordered text table.

    Args:
        headers: Column headers
        rows: Data rows; cells are converted with ``str``
        max_width: Maximum column width, longer cells are truncated
        align_right: Indexes of columns to right-align (amounts, hours)

    Returns:
        The table as a single string

    Example:
        >>> print(format_table(["Week", "Hours"], [["2025-10-26", "12.0"]], align_right=[1]))
        +------------+-------+
        | Week       | Hours |
        +------------+-------+
        | 2025-10-26 |  12.0 |
        +------------+-------+
    """
    if not headers:
        return ""

    right = set(align_right or [])
    cells: List[List[str]] = [
        [str(cell)[:max_width] for cell in row[: len(headers)]] for row in rows
    ]

    widths = [len(h) for h in headers]
    for row in cells:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(cell))
    widths = [min(w, max_width) for w in widths]

    def render(values: Sequence[str]) -> str:
        padded = []
        for i, width in enumerate(widths):
            value = values[i] if i < len(values) else ""
            padded.append(f" {value:>{width}} " if i in right else f" {value:<{width}} ")
        return "|" + "|".join(padded) + "|"

    separator = "+" + "+".join("-" * (w + 2) for w in widths) + "+"
    lines = [separator, render(list(headers)), separator]
    if cells:
        lines.extend(render(row) for row in cells)
        lines.append(separator)
    return "\n".join(lines)
