"""Delivery workers: long-running consumers of the output and error routes."""

import threading
from abc import ABC, abstractmethod
from typing import Generic, Optional, TypeVar

from pastewatch.domain.models import ErrorStage, MatchedPaste, OperationalError
from pastewatch.logging import get_logger
from pastewatch.notifications.models import NotificationError
from pastewatch.notifications.service import NotificationService
from pastewatch.pipeline.routes import DeliveryRoute

logger = get_logger(__name__, component="delivery")

T = TypeVar("T")


class DeliveryWorker(ABC, Generic[T]):
    """Consumes one route on a dedicated thread until the route is closed.

    Subclasses implement handle(). join() returns once the route has been
    closed and every item queued before the close has been handled.
    """

    thread_name = "delivery-worker"

    def __init__(self, route: DeliveryRoute):
        self.route = route
        self.handled = 0
        self.failed = 0
        self._thread: Optional[threading.Thread] = None

    def start(self) -> None:
        if self._thread is not None:
            raise RuntimeError(f"{self.thread_name} already started")
        self._thread = threading.Thread(target=self._run, name=self.thread_name, daemon=True)
        self._thread.start()

    def join(self, timeout: Optional[float] = None) -> None:
        if self._thread is not None:
            self._thread.join(timeout)

    def is_alive(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def _run(self) -> None:
        logger.debug(f"{self.thread_name} started", extra={"route": self.route.name})
        for item in self.route:
            self.handle(item)
            self.handled += 1
        logger.debug(
            f"{self.thread_name} drained",
            extra={"route": self.route.name, "handled": self.handled, "failed": self.failed},
        )

    @abstractmethod
    def handle(self, item: T) -> None:
        """Deliver one item. Must not raise."""
        pass


class OutputWorker(DeliveryWorker[MatchedPaste]):
    """Mails one alert per matched paste.

    A failed send is not retried. It goes to the error route as a DELIVERY
    error instead.
    """

    thread_name = "output-worker"

    def __init__(
        self,
        route: DeliveryRoute,
        notifier: NotificationService,
        error_route: DeliveryRoute,
    ):
        super().__init__(route)
        self.notifier = notifier
        self.error_route = error_route

    def handle(self, matched: MatchedPaste) -> None:
        logger.debug(f"Found paste:\n{matched}", extra={"paste_key": matched.key})
        try:
            self.notifier.send_paste_alert(matched)
        except NotificationError as e:
            self._fail(matched, e)
        except Exception as e:
            logger.error(
                f"Unexpected error delivering paste {matched.key}: {e}",
                extra={"event": "delivery.paste.unexpected", "paste_key": matched.key},
                exc_info=True,
            )
            self._fail(matched, e)

    def _fail(self, matched: MatchedPaste, exc: Exception) -> None:
        self.failed += 1
        self.error_route.put(
            OperationalError.from_exception(ErrorStage.DELIVERY, exc, matched.key)
        )


class ErrorWorker(DeliveryWorker[OperationalError]):
    """Logs every operational error and optionally escalates it by mail.

    A failed escalation is only logged. Putting it back on the error route
    would let one broken mail server feed the route forever.
    """

    thread_name = "error-worker"

    def __init__(
        self,
        route: DeliveryRoute,
        notifier: Optional[NotificationService] = None,
        mail_on_error: bool = False,
    ):
        super().__init__(route)
        self.notifier = notifier
        self.mail_on_error = mail_on_error and notifier is not None

    def handle(self, error: OperationalError) -> None:
        logger.error(
            str(error),
            extra={
                "event": "delivery.error.logged",
                "stage": error.stage.value,
                "paste_key": error.paste_key,
                "error_type": error.error_type,
            },
        )
        if not self.mail_on_error:
            return

        try:
            self.notifier.send_error_alert(error)
        except Exception as e:
            self.failed += 1
            logger.error(
                f"ERROR on sending error mail: {e}",
                extra={"event": "delivery.error.escalation_failed", "error_type": type(e).__name__},
            )
