"""
Datetime utility functions.
Provides replacements for deprecated datetime functions.
"""

from datetime import datetime
from typing import Optional
import pytz


def utcnow() -> datetime:
    """
    Get current UTC datetime using pytz.UTC.

    Returns:
        Current UTC datetime with pytz timezone information
    """
    return datetime.now(pytz.UTC)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """
    Normalize a datetime to UTC.

    Naive values are taken to already be UTC (SQLite hands back naive
    datetimes for timezone-aware columns).

    Args:
        value: Datetime or None

    Returns:
        Timezone-aware UTC datetime, or None
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return pytz.UTC.localize(value)
    return value.astimezone(pytz.UTC)


def to_iso(value: Optional[datetime]) -> Optional[str]:
    """
    Format a datetime as an ISO 8601 string in UTC.

    Examples:
        >>> to_iso(datetime(2026, 1, 21, 12, 0))
        "2026-01-21T12:00:00+00:00"
    """
    normalized = as_utc(value)
    return normalized.isoformat() if normalized else None
