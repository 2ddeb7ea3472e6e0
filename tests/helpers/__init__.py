"""Test helper utilities for pastewatch tests."""

from .fake_client import FakePastebinClient

__all__ = ["FakePastebinClient"]
