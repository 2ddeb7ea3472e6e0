"""Structured logging helpers for pastewatch."""

import logging
from typing import Optional


class ComponentLoggerAdapter(logging.LoggerAdapter):
    """LoggerAdapter that merges a fixed component field with per-call extras."""

    def process(self, msg, kwargs):
        # Call-site extras win over the adapter's defaults
        kwargs["extra"] = {**self.extra, **kwargs.get("extra", {})}
        return msg, kwargs


def get_logger(name: str, component: Optional[str] = None):
    """Return a logger that tags every record with ``component`` when given.

    Example:
        >>> logger = get_logger(__name__, component="poller")
        >>> logger.info("Cycle started", extra={"event": "poll.cycle.started"})
    """
    logger = logging.getLogger(name)
    if component:
        return ComponentLoggerAdapter(logger, {"component": component})
    return logger


__all__ = ["ComponentLoggerAdapter", "get_logger"]
