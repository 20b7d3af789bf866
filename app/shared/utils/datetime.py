"""
UTC datetime utilities for consistent timezone handling.

All datetime values in the system should be timezone-aware UTC.
Use these helpers instead of datetime.now() or datetime.utcnow().
"""

from datetime import UTC, datetime, time


def utc_now() -> datetime:
    """Return the current UTC datetime with timezone info."""
    return datetime.now(UTC)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """
    Ensure a datetime is UTC-aware.

    - If None, returns None
    - If naive, assumes UTC and attaches timezone
    - If aware, converts to UTC

    Use at repository/persistence boundaries to normalize datetimes
    (SQLite returns naive values for timezone-aware columns).
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def start_of_utc_day(dt: datetime) -> datetime:
    """Return midnight UTC of the day containing dt."""
    aware = ensure_utc(dt)
    assert aware is not None
    return datetime.combine(aware.date(), time.min, tzinfo=UTC)


def minutes_between(start: datetime, end: datetime) -> float:
    """Return the number of minutes from start to end (negative if end is earlier)."""
    s, e = ensure_utc(start), ensure_utc(end)
    assert s is not None and e is not None
    return (e - s).total_seconds() / 60
