"""Scheduler service that starts poll cycles at a fixed interval."""

import threading
from datetime import datetime, timezone
from typing import Callable, Optional

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from pastewatch.logging import get_logger

logger = get_logger(__name__, component="scheduler")

JOB_ID = "poll-cycle"


class SchedulerService:
    """
    Wraps APScheduler to start a poll cycle every ``interval_seconds``.

    A BackgroundScheduler runs the cycles on a worker thread while the main
    thread waits for signals. ``max_instances=1`` keeps cycles from
    overlapping, which makes the poll loop the only writer of its dedup
    cache. A cycle that runs past the next tick causes that tick to be
    skipped and coalesced.
    """

    def __init__(
        self,
        cycle_callable: Callable[[], object],
        interval_seconds: int = 60,
        shutdown_event: Optional[threading.Event] = None,
    ):
        """
        Initialize the scheduler service.

        Args:
            cycle_callable: Called on every tick (e.g. poll_loop.run_cycle)
            interval_seconds: Time between the starts of two cycles
            shutdown_event: Optional event set once the scheduler has shut down
        """
        self.cycle_callable = cycle_callable
        self.interval_seconds = interval_seconds
        self.shutdown_event = shutdown_event

        self.scheduler = BackgroundScheduler(
            job_defaults={
                "max_instances": 1,
                "coalesce": True,
                "misfire_grace_time": interval_seconds,
            },
            timezone=timezone.utc,
        )

    def start(self) -> None:
        """Register the poll job and start the scheduler; the first cycle runs immediately."""
        next_run = datetime.now(timezone.utc)
        self.scheduler.add_job(
            func=self.cycle_callable,
            trigger=IntervalTrigger(seconds=self.interval_seconds, timezone=timezone.utc),
            id=JOB_ID,
            name="Paste poll cycle",
            replace_existing=True,
            next_run_time=next_run,
        )
        self.scheduler.start()

        logger.info(
            f"Scheduler started with interval: {self.interval_seconds} seconds",
            extra={
                "event": "scheduler.started",
                "interval_seconds": self.interval_seconds,
                "next_run_time": next_run.isoformat(),
            },
        )

    def shutdown(self, wait: bool = True) -> None:
        """
        Stop scheduling new cycles.

        Args:
            wait: If True, block until a cycle that is already running returns
        """
        logger.info(
            "Shutting down scheduler",
            extra={"event": "scheduler.stopping", "wait_for_jobs": wait},
        )

        if self.scheduler.running:
            self.scheduler.shutdown(wait=wait)

        if self.shutdown_event:
            self.shutdown_event.set()

        logger.info("Scheduler shutdown complete", extra={"event": "scheduler.stopped"})

    def trigger_now(self):
        """Run one cycle synchronously in the calling thread and return its result."""
        logger.info("Triggering immediate poll cycle", extra={"event": "scheduler.trigger_now"})
        return self.cycle_callable()

    def is_running(self) -> bool:
        return self.scheduler.running

    def get_next_run_time(self) -> Optional[datetime]:
        job = self.scheduler.get_job(JOB_ID)
        return job.next_run_time if job else None
