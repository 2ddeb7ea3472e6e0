"""Delivery workers, shutdown coordination and the service lifecycle."""

from .service import PasteWatchService
from .shutdown import ShutdownCoordinator
from .workers import DeliveryWorker, ErrorWorker, OutputWorker

__all__ = [
    "PasteWatchService",
    "ShutdownCoordinator",
    "DeliveryWorker",
    "OutputWorker",
    "ErrorWorker",
]
