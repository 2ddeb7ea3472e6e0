"""Delivery routes: one-way queues from the poll loop to a delivery worker."""

import queue
import threading
from typing import Generic, Iterator, TypeVar

T = TypeVar("T")

_CLOSED = object()


class RouteClosedError(RuntimeError):
    """Raised when something is put on a route after it was closed."""


class DeliveryRoute(Generic[T]):
    """Unbounded FIFO channel with an explicit close.

    Producers call put(); the single consumer iterates the route, which
    yields every queued item and stops once close() has been called and the
    queue is drained.
    """

    def __init__(self, name: str):
        self.name = name
        self._queue: "queue.Queue[object]" = queue.Queue()
        self._lock = threading.Lock()
        self._closed = False

    def put(self, item: T) -> None:
        with self._lock:
            if self._closed:
                raise RouteClosedError(f"Route '{self.name}' is closed")
            self._queue.put(item)

    def close(self) -> None:
        """Stop accepting items. Items already queued are still delivered."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._queue.put(_CLOSED)

    @property
    def closed(self) -> bool:
        return self._closed

    def pending(self) -> int:
        """Approximate number of queued items (excluding the close marker)."""
        size = self._queue.qsize()
        return size - 1 if self._closed and size else size

    def __iter__(self) -> Iterator[T]:
        while True:
            item = self._queue.get()
            if item is _CLOSED:
                return
            yield item
