"""Time utilities for eguard-batch."""

from datetime import datetime, timezone
from zoneinfo import ZoneInfo


def utc_now() -> datetime:
    """Current UTC time (timezone-aware)."""
    return datetime.now(timezone.utc)


def epoch_millis(moment: datetime | None = None) -> int:
    """
    Milliseconds since the Unix epoch.

    Args:
        moment: Aware datetime to convert (defaults to now)

    Returns:
        Integer milliseconds
    """
    moment = moment or utc_now()
    return int(moment.timestamp() * 1000)


def get_timezone(tz_name: str) -> ZoneInfo:
    """
    Get timezone object from an IANA timezone name.

    Raises:
        ValueError: Invalid timezone name
    """
    try:
        return ZoneInfo(tz_name)
    except Exception as e:
        raise ValueError(f"Invalid timezone '{tz_name}': {e}") from e
