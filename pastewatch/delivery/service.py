"""Top-level service lifecycle: start the tasks, wait for shutdown, drain in order."""

from typing import Optional

from pastewatch.fetcher.client import PastebinClient
from pastewatch.logging import get_logger
from pastewatch.pipeline.models import CycleResult
from pastewatch.pipeline.poller import PollLoop
from pastewatch.scheduler.service import SchedulerService

from .shutdown import ShutdownCoordinator
from .workers import ErrorWorker, OutputWorker

logger = get_logger(__name__, component="service")


class PasteWatchService:
    """
    Owns the poll loop, both delivery workers and the shutdown sequence.

    Drain order matters: the poll loop must be fully stopped before the
    output route closes, and the output worker (which can still report
    delivery failures) must be finished before the error route closes.
    That way nothing is ever put on a closed route.
    """

    def __init__(
        self,
        poll_loop: PollLoop,
        output_worker: OutputWorker,
        error_worker: ErrorWorker,
        coordinator: ShutdownCoordinator,
        interval_seconds: int = 60,
        scheduler: Optional[SchedulerService] = None,
        client: Optional[PastebinClient] = None,
    ):
        self.poll_loop = poll_loop
        self.output_worker = output_worker
        self.error_worker = error_worker
        self.coordinator = coordinator
        self.scheduler = scheduler or SchedulerService(
            cycle_callable=poll_loop.run_cycle,
            interval_seconds=interval_seconds,
        )
        self.client = client
        self._workers_started = False
        self._drained = False

    def start_workers(self) -> None:
        if self._workers_started:
            return
        self.output_worker.start()
        self.error_worker.start()
        self._workers_started = True

    def run_forever(self) -> None:
        """Poll on schedule until shutdown is requested, then drain."""
        self.start_workers()
        try:
            self.scheduler.start()
            logger.info(
                "Polling started. Press Ctrl+C to stop",
                extra={"event": "service.polling.started"},
            )
            self.coordinator.wait()
        finally:
            self.drain()

    def run_once(self) -> CycleResult:
        """Run a single poll cycle immediately, then drain."""
        self.start_workers()
        try:
            return self.poll_loop.run_cycle()
        finally:
            self.drain()

    def drain(self) -> None:
        """Stop polling and let both workers empty their routes. Idempotent."""
        if self._drained:
            return
        self._drained = True

        logger.info("Draining delivery routes", extra={"event": "service.drain.started"})

        # Blocks until an in-progress cycle returns
        self.scheduler.shutdown(wait=True)

        self.output_worker.route.close()
        self.output_worker.join()

        self.error_worker.route.close()
        self.error_worker.join()

        if self.client is not None:
            self.client.close()

        logger.info(
            "Delivery routes drained",
            extra={
                "event": "service.drain.completed",
                "alerts_handled": self.output_worker.handled,
                "alerts_failed": self.output_worker.failed,
                "errors_handled": self.error_worker.handled,
            },
        )
