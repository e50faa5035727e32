"""Calendar week bucketing for cost aggregation.

Weeks run Sunday to Saturday. Two formulations of the week start are
provided and must agree for every date:
- ``week_start``: plain date arithmetic on the weekday number
- ``week_start_from_period``: the pandas weekly period anchored on Saturday

These utilities work on ``dt.date`` values; datetimes are truncated to
their date.
"""

import datetime as dt
from typing import Iterator, Tuple, Union

import pandas as pd

DAYS_IN_WEEK = 7

DateLike = Union[dt.date, dt.datetime]


def _as_date(value: DateLike) -> dt.date:
    if isinstance(value, dt.datetime):
        return value.date()
    return value


def days_since_sunday(value: DateLike) -> int:
    """Day of week with Sunday as 0 and Saturday as 6.

    Example:
        >>> days_since_sunday(dt.date(2025, 10, 26))
        0
        >>> days_since_sunday(dt.date(2025, 10, 28))
        2
    """
    # date.weekday() has Monday as 0
    return (_as_date(value).weekday() + 1) % DAYS_IN_WEEK


def week_start(value: DateLike) -> dt.date:
    """Return the Sunday on or before the given date.

    Example:
        >>> week_start(dt.date(2025, 10, 28))
        datetime.date(2025, 10, 26)
        >>> week_start(dt.date(2025, 10, 26))
        datetime.date(2025, 10, 26)
    """
    day = _as_date(value)
    return day - dt.timedelta(days=days_since_sunday(day))


def week_start_from_period(value: DateLike) -> dt.date:
    """Return the Sunday on or before the given date using pandas periods.

    A ``W-SAT`` period ends on Saturday, so it starts on the Sunday before.

    Example:
        >>> week_start_from_period(dt.date(2025, 11, 1))
        datetime.date(2025, 10, 26)
    """
    period = pd.Period(_as_date(value), freq="W-SAT")
    return period.start_time.date()


def week_end(value: DateLike) -> dt.date:
    """Return the Saturday closing the week of the given date.

    Example:
        >>> week_end(dt.date(2025, 10, 28))
        datetime.date(2025, 11, 1)
    """
    return week_start(value) + dt.timedelta(days=DAYS_IN_WEEK - 1)


def week_bounds(value: DateLike) -> Tuple[dt.date, dt.date]:
    """Return ``(week_start, week_end)`` for the given date."""
    start = week_start(value)
    return start, start + dt.timedelta(days=DAYS_IN_WEEK - 1)


def iter_weeks(start: DateLike, end: DateLike) -> Iterator[dt.date]:
    """Yield the week start of every week touching ``[start, end]``.

    Example:
        >>> list(iter_weeks(dt.date(2025, 10, 28), dt.date(2025, 11, 4)))
        [datetime.date(2025, 10, 26), datetime.date(2025, 11, 2)]
    """
    current = week_start(start)
    last = week_start(end)
    while current <= last:
        yield current
        current += dt.timedelta(days=DAYS_IN_WEEK)
