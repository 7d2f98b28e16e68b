"""
Temporal Utility Functions.

This module provides utility functions for working with timezones, dates
and calendar edge cases, particularly for recurring transaction detection.
"""

from datetime import datetime, time, timedelta, tzinfo
from typing import Optional, Tuple, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


def resolve_timezone(tz: Union[str, tzinfo, None]) -> tzinfo:
    """
    Resolve a timezone argument into a tzinfo instance.

    Args:
        tz: IANA timezone name (e.g. "America/Chicago") or a tzinfo instance

    Returns:
        tzinfo object

    Raises:
        ValueError: If the timezone is missing, of the wrong type or unknown
    """
    if isinstance(tz, tzinfo):
        return tz
    if not isinstance(tz, str) or not tz.strip():
        raise ValueError(f"Invalid timezone: {tz!r}")
    try:
        return ZoneInfo(tz.strip())
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ValueError(f"Unknown timezone: {tz!r}") from e


def localize(dt: datetime, tz: tzinfo) -> datetime:
    """
    Express dt in the given timezone.

    Naive datetimes are assumed to already be wall-clock time in tz.
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=tz)
    return dt.astimezone(tz)


def midnight(dt: datetime, tz: tzinfo) -> datetime:
    """Return local midnight of dt's calendar day in tz."""
    return datetime.combine(localize(dt, tz).date(), time.min, tzinfo=tz)


def add_days(dt: datetime, days: int) -> datetime:
    """Shift dt by whole calendar days, keeping its wall-clock time."""
    return dt + timedelta(days=days)


def hours_between(a: datetime, b: datetime) -> float:
    """Absolute elapsed time between two aware datetimes, in hours."""
    return abs((a - b).total_seconds()) / 3600


def month_day_params(day: int) -> Tuple[Tuple[int, ...], Optional[int]]:
    """
    Build BYMONTHDAY/BYSETPOS values for "day N of the month".

    Days 29 to 31 do not exist in every month; rather than skipping those
    months, the rule picks the last existing day up to N (day 31 in
    February lands on the 28th or 29th).

    Returns:
        Tuple of (by_month_day, by_set_pos)
    """
    if not (1 <= day <= 31):
        raise ValueError(f"day of month must be between 1 and 31, got {day}")
    if day <= 28:
        return (day,), None
    return tuple(range(28, day + 1)), -1
