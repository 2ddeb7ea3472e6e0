"""Periodic execution of poll cycles."""

from .service import SchedulerService

__all__ = [
    "SchedulerService",
]
