"""
Historical Query Windows
========================

Computes the ``[start, end]`` date pair sent to the history endpoint for a
seasonal view.

- daily:    end = today, start = today minus N years (same month/day)
- weekly, monthly, earnings:
            end = first day of the current month,
            start = January 1st of the current year minus N years

Aggregated intervals are aligned to whole-period boundaries so the endpoint
never returns a partial leading or trailing week/month.
"""

import re
from datetime import date, datetime
from typing import Union

import pytz

from .models import DATE_FORMAT, HistoricalWindow, Interval

ET = pytz.timezone("America/New_York")

SUPPORTED_DURATIONS = ("1y", "2y", "3y", "4y", "5y")

_DURATION_RE = re.compile(r"^([1-5])y$")


def parse_duration(token: str) -> int:
    """
    Parse a lookback token such as ``"3y"`` into a number of years.

    Raises:
        ValueError: token is not one of SUPPORTED_DURATIONS
    """
    match = _DURATION_RE.match(token.strip().lower()) if isinstance(token, str) else None
    if not match:
        raise ValueError(
            f"Unsupported duration {token!r}; expected one of {', '.join(SUPPORTED_DURATIONS)}"
        )
    return int(match.group(1))


def market_today() -> date:
    """Current calendar date on the US equity market clock (America/New_York)."""
    return datetime.now(ET).date()


def to_query_date(value: Union[str, date, datetime]) -> date:
    """
    Coerce a caller-supplied date to a calendar date.

    Strings are read as ``YYYY-MM-DD``; longer timestamps are truncated.

    Raises:
        ValueError: value is not a date, datetime or ISO date string
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise ValueError(f"Expected a date or YYYY-MM-DD string, got {value!r}")
    try:
        return datetime.strptime(value[:10], DATE_FORMAT).date()
    except ValueError as e:
        raise ValueError(f"Invalid date {value!r}; expected YYYY-MM-DD") from e


def subtract_years(d: date, years: int) -> date:
    """Same month/day ``years`` earlier; Feb 29 falls back to Feb 28."""
    try:
        return d.replace(year=d.year - years)
    except ValueError:
        return d.replace(year=d.year - years, day=28)


def compute_window(
    lookback_years: int,
    interval: Union[Interval, str],
    today: date,
) -> HistoricalWindow:
    """
    Compute the history query window for a lookback and interval.

    Args:
        lookback_years: Positive number of years to look back
        interval: Sampling interval (Interval or its string value)
        today: Reference date

    Returns:
        HistoricalWindow with start_date <= end_date

    Example:
        >>> compute_window(1, "monthly", date(2024, 6, 15))
        HistoricalWindow(start_date=datetime.date(2023, 1, 1), end_date=datetime.date(2024, 6, 1), ...)
    """
    interval = Interval(interval)

    if interval is Interval.DAILY:
        start = subtract_years(today, lookback_years)
        end = today
    else:
        start = date(today.year - lookback_years, 1, 1)
        end = today.replace(day=1)

    return HistoricalWindow(start_date=start, end_date=end, interval=interval)
