"""UTC timestamp helpers."""

from datetime import datetime, timezone
from typing import Any, Optional


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def parse_epoch(value: Any) -> Optional[datetime]:
    """
    Parse a Unix timestamp as delivered by the scraping API ("1700000000").

    Returns None for missing or malformed values instead of raising; paste
    metadata is informational only.
    """
    if value is None or value == "":
        return None
    try:
        return datetime.fromtimestamp(int(value), tz=timezone.utc)
    except (TypeError, ValueError, OverflowError, OSError):
        return None
