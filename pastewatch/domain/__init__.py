"""Domain models for pastes, matches and operational errors."""

from .models import ErrorStage, MatchedPaste, OperationalError, PasteItem

__all__ = ["PasteItem", "MatchedPaste", "OperationalError", "ErrorStage"]
