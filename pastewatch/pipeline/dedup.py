"""Time-bounded record of paste keys that have already been processed."""

from datetime import datetime, timedelta
from typing import Dict, Iterator, Optional

DEFAULT_RETENTION = timedelta(minutes=10)


class DedupCache:
    """In-memory key -> first-processed-at map with periodic expiry.

    The poll loop is the only caller, so there is no locking. Growth is
    bounded by the expiry sweep at the end of every cycle: the upstream list
    only ever shows the most recent pastes, so keys older than the retention
    window stop reappearing.
    """

    def __init__(self, retention: timedelta = DEFAULT_RETENTION):
        if retention <= timedelta(0):
            raise ValueError("retention must be positive")
        self.retention = retention
        self._entries: Dict[str, datetime] = {}

    def seen(self, key: str) -> bool:
        return key in self._entries

    def mark_seen(self, key: str, now: datetime) -> None:
        """Record ``key`` as processed at ``now``; an existing entry keeps its time."""
        self._entries.setdefault(key, now)

    def expire(self, now: datetime) -> int:
        """Drop every entry recorded before ``now - retention``.

        Returns:
            Number of entries removed
        """
        threshold = now - self.retention
        expired = [key for key, seen_at in self._entries.items() if seen_at < threshold]
        for key in expired:
            del self._entries[key]
        return len(expired)

    def seen_at(self, key: str) -> Optional[datetime]:
        return self._entries.get(key)

    def __contains__(self, key: str) -> bool:
        return self.seen(key)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._entries))
