"""Poll pipeline: dedup cache, delivery routes and the poll loop."""

from .dedup import DedupCache
from .models import CycleResult, PollState
from .poller import PollLoop
from .routes import DeliveryRoute, RouteClosedError

__all__ = [
    "PollLoop",
    "DedupCache",
    "DeliveryRoute",
    "RouteClosedError",
    "CycleResult",
    "PollState",
]
