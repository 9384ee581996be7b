"""Time and date utilities."""

from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo


def utc_now() -> datetime:
    """Get current UTC datetime.

    Returns:
        Current datetime in UTC timezone
    """
    return datetime.now(timezone.utc)


def local_today(tz_name: str) -> date:
    """Get the current calendar date in a named timezone.

    Threshold tables are effective by calendar date in the firm's local
    timezone, not in UTC.

    Args:
        tz_name: IANA timezone name (e.g. "America/Denver")

    Returns:
        Today's date in that timezone
    """
    return utc_now().astimezone(ZoneInfo(tz_name)).date()
