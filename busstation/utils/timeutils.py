"""
Time helpers shared by models and the dispatch workflow.

All timestamps are stored as naive UTC datetimes.
"""

from datetime import datetime, date, time, timedelta, timezone
from typing import Optional


def utcnow() -> datetime:
    """Current time as a naive UTC datetime"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: datetime) -> datetime:
    """Normalize an aware datetime to naive UTC; naive values are assumed UTC already"""
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def isoformat_or_none(value) -> Optional[str]:
    if value is None:
        return None
    return value.isoformat()


def combine_date_time(day: date, clock: str) -> datetime:
    """
    Combine a date with an "HH:MM" (or "HH:MM:SS") string.

    Raises:
        ValueError: If the clock string is not a valid time
    """
    parsed = time.fromisoformat(clock)
    return datetime.combine(day, parsed)


def day_bounds(day: date):
    """Return [start, end) datetimes covering a calendar day"""
    start = datetime.combine(day, time.min)
    end = start + timedelta(days=1)
    return start, end
