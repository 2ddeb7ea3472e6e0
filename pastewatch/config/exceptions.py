"""Exceptions raised while loading and validating configuration."""

from typing import List, Optional


class ConfigurationError(Exception):
    """
    Raised when configuration cannot be loaded or is invalid.

    Carries a primary message plus optional lists of individual errors and
    suggestions, rendered together so the operator sees everything at once.
    Configuration errors are fatal: the service never starts polling.
    """

    def __init__(
        self,
        message: str,
        errors: Optional[List[str]] = None,
        suggestions: Optional[List[str]] = None,
    ):
        self.message = message
        self.errors = errors or []
        self.suggestions = suggestions or []
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        parts = [self.message]

        if self.errors:
            parts.append("\nValidation Errors:")
            for i, error in enumerate(self.errors, 1):
                parts.append(f"  {i}. {error}")

        if self.suggestions:
            parts.append("\nSuggestions:")
            for suggestion in self.suggestions:
                parts.append(f"  - {suggestion}")

        return "\n".join(parts)


class PatternCompileError(ConfigurationError):
    """A configured keyword could not be compiled into a line pattern."""

    def __init__(self, keyword: str, reason: str):
        self.keyword = keyword
        super().__init__(
            f"Keyword {keyword!r} produced an invalid pattern: {reason}",
            suggestions=["Check the keyword for unusual characters"],
        )
