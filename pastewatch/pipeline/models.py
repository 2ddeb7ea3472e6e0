"""Data models for poll cycle tracking and reporting."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class PollState(str, Enum):
    """States of the poll loop.

    IDLE is the wait between cycles, which the scheduler owns. A cycle moves
    LISTING -> PROCESSING -> EXPIRING and returns to IDLE. STOPPED is
    terminal and is entered once the termination flag is seen.
    """

    IDLE = "idle"
    LISTING = "listing"
    PROCESSING = "processing"
    EXPIRING = "expiring"
    STOPPED = "stopped"


@dataclass
class CycleResult:
    """
    Counters for one poll cycle.

    Attributes:
        cycle_id: Identifier attached to every log line of the cycle
        started_at: UTC time the cycle began
        finished_at: UTC time the cycle ended
        listed: Pastes returned by the list endpoint
        skipped: Pastes skipped because their key was already seen
        fetched: Paste bodies fetched successfully
        matched: Pastes that produced at least one hit
        errors: Operational errors reported during the cycle
        expired: Dedup entries removed by the expiry sweep
        list_failed: Whether the list call failed
        stopped: Whether termination cut the cycle short (or prevented it)
        rejected: Whether the cycle did not run because another was in progress
    """

    cycle_id: str
    started_at: datetime
    finished_at: Optional[datetime] = None
    listed: int = 0
    skipped: int = 0
    fetched: int = 0
    matched: int = 0
    errors: int = 0
    expired: int = 0
    list_failed: bool = False
    stopped: bool = False
    rejected: bool = False

    @property
    def duration_seconds(self) -> float:
        if self.finished_at is None:
            return 0.0
        return (self.finished_at - self.started_at).total_seconds()

    @property
    def had_errors(self) -> bool:
        return self.errors > 0
