"""Datetime utilities with consistent UTC timezone handling.

Creation timestamps are timezone-aware UTC datetimes, while due dates are
plain calendar dates. The helpers here convert between the two and map
Python's Monday-based weekdays onto the Sunday-based ordinals used by
recurrence rules.
"""

from datetime import date, datetime, timezone
from typing import Optional, Union


def now_utc() -> datetime:
    """Return current datetime in UTC timezone.

    Returns:
        Current datetime with timezone=UTC
    """
    return datetime.now(timezone.utc)


def ensure_aware(dt: Optional[datetime]) -> Optional[datetime]:
    """Ensure datetime is timezone-aware, assuming UTC if naive.

    Args:
        dt: Datetime to check/convert, or None

    Returns:
        Timezone-aware datetime in UTC, or None if input was None
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        # Naive datetime - assume UTC
        return dt.replace(tzinfo=timezone.utc)

    return dt


def to_date(value: Union[date, datetime]) -> date:
    """Reduce a datetime to its calendar date; dates pass through.

    Aware datetimes are converted to local time first, so the date is the
    one on the user's calendar. Naive datetimes are taken as local.
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            return value.astimezone().date()
        return value.date()
    return value


def sunday_ordinal(day: Union[date, datetime]) -> int:
    """Weekday ordinal with Sunday=0 ... Saturday=6."""
    return (day.weekday() + 1) % 7


def to_iso_string(dt: Optional[datetime]) -> Optional[str]:
    """Convert datetime to ISO string with timezone info.

    Args:
        dt: Datetime to convert, or None

    Returns:
        ISO format string with timezone, or None if input was None
    """
    if dt is None:
        return None

    return ensure_aware(dt).isoformat()


def parse_iso_datetime(value: Union[str, datetime, None]) -> Optional[datetime]:
    """Parse an ISO timestamp, returning None for empty or invalid input.

    Raises:
        TypeError: If the value is neither a string nor a datetime.
    """
    if not value:
        return None
    if isinstance(value, datetime):
        return ensure_aware(value)
    if not isinstance(value, str):
        raise TypeError(f"Expected an ISO timestamp string, got {type(value).__name__}")
    try:
        return ensure_aware(datetime.fromisoformat(value))
    except ValueError:
        return None


def parse_iso_date(value: Union[str, date, None]) -> Optional[date]:
    """Parse a YYYY-MM-DD string (or a full timestamp) into a date."""
    if not value:
        return None
    if isinstance(value, date):
        return to_date(value)
    if not isinstance(value, str):
        raise TypeError(f"Expected an ISO date string, got {type(value).__name__}")
    try:
        return date.fromisoformat(value)
    except ValueError:
        parsed = parse_iso_datetime(value)
        return parsed.date() if parsed else None
