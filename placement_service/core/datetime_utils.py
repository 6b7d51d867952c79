"""
Datetime helpers. All timestamps in the service are timezone-aware UTC.
"""
from datetime import datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    """
    Current time as an aware UTC datetime.

    This is the default clock handed to the placement engine; tests swap it
    for a fixed or stepping clock.
    """
    return datetime.now(timezone.utc)


def ensure_timezone_aware(dt: Optional[datetime]) -> datetime:
    """
    Attach UTC to a naive datetime.

    SQLite hands back naive datetimes even for ``DateTime(timezone=True)``
    columns, which breaks arithmetic against ``utc_now()``.

    Raises:
        ValueError: If dt is None
    """
    if dt is None:
        raise ValueError("datetime cannot be None")
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt
