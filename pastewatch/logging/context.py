"""Scoped logging context.

Fields pushed here are attached to every log record emitted while the scope
is active. Context lives in a ContextVar, so each thread (the poll loop and
the two delivery workers) sees only its own fields.
"""

from contextvars import ContextVar, Token
from typing import Any, Dict, Optional

LogContextVar: ContextVar[Dict[str, Any]] = ContextVar("log_context", default={})


def get_log_context() -> Dict[str, Any]:
    """Return a copy of the active context fields."""
    return LogContextVar.get().copy()


def push_log_context(**kwargs) -> Token:
    """Merge ``kwargs`` into the active context; undo with pop_log_context()."""
    return LogContextVar.set({**LogContextVar.get(), **kwargs})


def pop_log_context(token: Token) -> None:
    LogContextVar.reset(token)


def clear_log_context() -> None:
    """Drop every context field. Mostly useful in tests."""
    LogContextVar.set({})


class log_context:
    """Context manager form of push/pop.

    Example:
        >>> with log_context(cycle_id="c0ffee", paste_key="AbCdEf12"):
        ...     logger.info("Fetching paste")
    """

    def __init__(self, **kwargs):
        self.kwargs = kwargs
        self.token: Optional[Token] = None

    def __enter__(self):
        self.token = push_log_context(**self.kwargs)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.token is not None:
            pop_log_context(self.token)
        return False
