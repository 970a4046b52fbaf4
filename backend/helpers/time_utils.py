"""
Calendar helpers for dashboard views.
"""

from datetime import datetime, timezone
from typing import List, Tuple

MONTH_ABBREVIATIONS = (
    "Jan",
    "Feb",
    "Mar",
    "Apr",
    "May",
    "Jun",
    "Jul",
    "Aug",
    "Sep",
    "Oct",
    "Nov",
    "Dec",
)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(dt: datetime) -> datetime:
    """
    Make a datetime timezone-aware in UTC.

    SQLite hands back naive datetimes; they are stored as UTC.
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def month_abbreviation(month: int) -> str:
    """Three-letter English abbreviation for a month number (1-12)."""
    return MONTH_ABBREVIATIONS[month - 1]


def trailing_months(now: datetime, count: int = 6) -> List[Tuple[int, int]]:
    """
    The last `count` calendar months as (year, month), oldest first.

    The month containing `now` is the last entry.

    Args:
        now: Reference instant
        count: Number of months

    Returns:
        List of (year, month) tuples
    """
    months: List[Tuple[int, int]] = []
    year, month = now.year, now.month
    for _ in range(count):
        months.append((year, month))
        month -= 1
        if month == 0:
            month = 12
            year -= 1
    months.reverse()
    return months


def start_of_month(year: int, month: int) -> datetime:
    """First instant of a calendar month in UTC."""
    return datetime(year, month, 1, tzinfo=timezone.utc)
