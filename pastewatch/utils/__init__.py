"""Shared helpers."""

from .timestamps import parse_epoch, utc_now

__all__ = ["utc_now", "parse_epoch"]
