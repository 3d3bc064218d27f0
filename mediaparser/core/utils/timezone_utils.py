"""
Timezone utilities module.

All database times are stored in UTC. API responses carry ISO 8601
strings with timezone info.
"""

from datetime import datetime, timezone
from typing import Optional


def get_utc_now() -> datetime:
    """
    Get the current UTC time.

    Returns:
        datetime: Current time with UTC timezone info.
    """
    return datetime.now(timezone.utc)


def to_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """
    Convert a datetime object to UTC time.

    Naive datetimes come from SQLite and are assumed to already be UTC.
    """
    if dt is None:
        return None

    if dt.tzinfo is not None:
        return dt.astimezone(timezone.utc)

    return dt.replace(tzinfo=timezone.utc)


def format_datetime_iso(dt: Optional[datetime]) -> Optional[str]:
    """
    Format a datetime to ISO 8601 string, e.g. "2025-11-29T10:30:00+00:00".

    Returns None if input is None.
    """
    if dt is None:
        return None
    return to_utc(dt).isoformat()
