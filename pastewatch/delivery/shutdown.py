"""Shutdown coordination between signal handlers and the running tasks."""

import signal
import threading
from typing import Iterable, Optional

from pastewatch.logging import get_logger

logger = get_logger(__name__, component="shutdown")

DEFAULT_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class ShutdownCoordinator:
    """
    Turns the first interrupt into a shutdown request.

    A request sets two events: ``terminate_event``, which the poll loop
    checks between pastes and cycles, and ``cancel_event``, which aborts
    in-flight HTTP calls. Later requests only get logged.
    """

    def __init__(
        self,
        terminate_event: Optional[threading.Event] = None,
        cancel_event: Optional[threading.Event] = None,
    ):
        self.terminate_event = terminate_event or threading.Event()
        self.cancel_event = cancel_event or threading.Event()
        self.request_count = 0
        self._requested = threading.Event()
        # Re-entrant: a signal handler can interrupt the main thread inside request_shutdown()
        self._lock = threading.RLock()

    def install(self, signals: Iterable[int] = DEFAULT_SIGNALS) -> None:
        """Route ``signals`` to request_shutdown(). Must run on the main thread."""
        for signum in signals:
            signal.signal(signum, self._handle_signal)

    def _handle_signal(self, signum, frame) -> None:
        self.request_shutdown(reason=signal.Signals(signum).name)

    def request_shutdown(self, reason: str = "requested") -> bool:
        """
        Request shutdown.

        Returns:
            True for the request that triggered shutdown, False afterwards
        """
        with self._lock:
            self.request_count += 1
            if self._requested.is_set():
                logger.info(
                    f"Shutdown already in progress ({reason})",
                    extra={"event": "service.shutdown.repeated", "reason": reason},
                )
                return False

            self.terminate_event.set()
            self.cancel_event.set()
            self._requested.set()

        logger.info(
            f"Shutdown requested ({reason})",
            extra={"event": "service.shutdown.requested", "reason": reason},
        )
        return True

    @property
    def requested(self) -> bool:
        return self._requested.is_set()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until shutdown is requested; False if ``timeout`` ran out first."""
        return self._requested.wait(timeout)
