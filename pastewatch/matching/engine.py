"""Keyword matching engine for evaluating paste bodies against compiled patterns.

For every configured keyword the engine:
1. Finds the first line of the body containing the keyword
2. Trims surrounding whitespace from that line
3. Drops the hit if the line contains one of the keyword's exceptions
"""

import logging
from typing import Dict, Mapping, Optional

from .models import MatchResult
from .patterns import CompiledPattern

logger = logging.getLogger(__name__)


class KeywordMatcher:
    """Evaluates paste bodies against an immutable set of compiled patterns.

    The pattern mapping is built once at startup and only read afterwards,
    so a single matcher is shared by every poll cycle.
    """

    def __init__(
        self,
        patterns: Mapping[str, CompiledPattern],
        logger_instance: Optional[logging.Logger] = None,
    ):
        """Initialize KeywordMatcher.

        Args:
            patterns: keyword -> CompiledPattern, as built by compile_patterns()
            logger_instance: Optional logger instance (defaults to module logger)
        """
        self.patterns = dict(patterns)
        self.logger = logger_instance or logger

    def evaluate(self, body: str) -> MatchResult:
        """Evaluate a body against every pattern.

        A body can trigger several keywords at once; every hit that survives
        its exception list is returned in the same result.

        Args:
            body: Full paste text

        Returns:
            MatchResult with the keyword -> line hits
        """
        hits: Dict[str, str] = {}
        suppressed: Dict[str, str] = {}

        for keyword, pattern in self.patterns.items():
            line = pattern.first_line(body)
            if line is None:
                continue

            exception = pattern.exception_in(line)
            if exception is not None:
                self.logger.debug(
                    f"Line {line!r} contains exception {exception!r}",
                    extra={"keyword": keyword, "exception": exception},
                )
                suppressed[keyword] = exception
                continue

            hits[keyword] = line

        return MatchResult(matched=bool(hits), hits=hits, suppressed=suppressed)
