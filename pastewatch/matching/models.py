"""Data models for the matching engine."""

from dataclasses import dataclass, field
from typing import Dict, List


@dataclass
class MatchResult:
    """Outcome of evaluating one paste body against every compiled pattern.

    Attributes:
        matched: True when at least one keyword produced a hit
        hits: Keyword -> trimmed line that matched it
        suppressed: Keyword -> exception that vetoed its line
    """

    matched: bool
    hits: Dict[str, str] = field(default_factory=dict)
    suppressed: Dict[str, str] = field(default_factory=dict)

    @property
    def keywords(self) -> List[str]:
        return sorted(self.hits)

    def __bool__(self) -> bool:
        return self.matched
