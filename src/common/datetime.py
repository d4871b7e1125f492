"""Datetime utilities.

All timestamps are persisted as ISO-8601 UTC strings with millisecond
precision so that string comparison in SQL matches chronological order.
"""

from datetime import datetime, timezone


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_iso(value: datetime) -> str:
    """Format a datetime as a UTC ISO string (naive values are assumed UTC)."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="milliseconds")


def utc_now_iso() -> str:
    return to_iso(utc_now())
