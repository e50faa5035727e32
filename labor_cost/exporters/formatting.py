"""Display formatting shared by the CLI and the document exporters."""

import datetime as dt
import re
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from pathlib import Path
from typing import Optional, Union

Amount = Union[int, float, str, Decimal]

CENTS = Decimal("0.01")


@dataclass(frozen=True)
class Branding:
    """Company details printed on exported documents."""

    company_name: str = "BRACKVALE"
    currency_symbol: str = "€"
    logo_path: Optional[Path] = None

    @classmethod
    def from_config(cls, config) -> "Branding":
        return cls(
            company_name=config.company_name,
            currency_symbol=config.currency_symbol,
            logo_path=config.logo_path,
        )


def format_long_date(value: dt.date) -> str:
    """
    Format a date the way timesheets show it.

    Example:
        >>> format_long_date(dt.date(2025, 10, 28))
        'Tuesday 28 Oct 2025'
    """
    return f"{value.strftime('%A')} {value.day} {value.strftime('%b')} {value.year}"


def format_week_range(start: dt.date, end: dt.date) -> str:
    return f"{format_long_date(start)} - {format_long_date(end)}"


def format_currency(amount: Optional[Amount], symbol: str = "€") -> str:
    """
    Format an amount with two decimals, rounding half up.

    Example:
        >>> format_currency(Decimal("660"))
        '€660.00'
    """
    value = Decimal(str(amount if amount is not None else 0))
    return f"{symbol}{value.quantize(CENTS, rounding=ROUND_HALF_UP)}"


def format_rate(rate: Optional[Amount], symbol: str = "€") -> str:
    """
    Format an hourly rate, dropping decimals when it is a whole number.

    Example:
        >>> format_rate(Decimal("45"))
        '€45'
    """
    if rate is None:
        return "-"
    value = Decimal(str(rate))
    if value == value.to_integral_value():
        return f"{symbol}{value.quantize(Decimal('1'))}"
    return format_currency(value, symbol)


def format_hours(hours: Amount) -> str:
    """Hours with one decimal, e.g. ``8.0``."""
    return f"{Decimal(str(hours)).quantize(Decimal('0.1'), rounding=ROUND_HALF_UP)}"


def safe_filename(text: str) -> str:
    """Reduce free text to characters safe in file names."""
    cleaned = re.sub(r"[^A-Za-z0-9._-]+", "_", text.strip())
    return cleaned.strip("_") or "export"


def document_filename(name: str, kind: str, week_start: dt.date, suffix: str) -> str:
    """
    File name of an exported document.

    Example:
        >>> document_filename("John Smith", "Timesheet", dt.date(2025, 10, 26), "xlsx")
        'John_Smith_Timesheet_2025-10-26.xlsx'
    """
    return f"{safe_filename(name)}_{kind}_{week_start.isoformat()}.{suffix}"
