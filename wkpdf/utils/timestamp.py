"""Timestamp formatting utilities."""

from datetime import datetime, timezone
from email.utils import format_datetime


def now() -> str:
    """Compact local timestamp for directory names (e.g., "20251114_123456")."""
    return datetime.now().strftime("%Y%m%d_%H%M%S")


def now_exact() -> str:
    """ISO 8601 timestamp with microseconds, used in event logs."""
    return datetime.now().isoformat()


def http_date(dt: datetime = None) -> str:
    """
    Format a datetime as an RFC 7231 HTTP date.

    Args:
        dt: Datetime to format (default: current UTC time). Naive datetimes
            are treated as UTC.

    Returns:
        HTTP date string, e.g. "Sat, 26 Jul 1997 05:00:00 GMT"
    """
    if dt is None:
        dt = datetime.now(timezone.utc)
    elif dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)

    return format_datetime(dt.astimezone(timezone.utc), usegmt=True)
