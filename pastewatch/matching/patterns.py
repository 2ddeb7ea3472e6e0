"""Compilation of configured keywords into whole-line patterns."""

import re
from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Pattern, Tuple

from pastewatch.config.exceptions import PatternCompileError
from pastewatch.config.models import KeywordRule

LINE_PATTERN = r"^(.*\b{keyword}.*)$"
PATTERN_FLAGS = re.IGNORECASE | re.MULTILINE


@dataclass(frozen=True)
class CompiledPattern:
    """A keyword's line matcher together with its exception substrings.

    Attributes:
        keyword: The keyword exactly as configured
        regex: Case-insensitive multiline pattern capturing the whole line
        exceptions: Substrings that suppress a hit, in configured order
    """

    keyword: str
    regex: Pattern[str]
    exceptions: Tuple[str, ...] = ()

    def first_line(self, body: str) -> Optional[str]:
        """Return the first line containing the keyword, trimmed, or None."""
        match = self.regex.search(body)
        if match is None:
            return None
        return match.group(1).strip()

    def exception_in(self, line: str) -> Optional[str]:
        """Return the first exception contained in ``line``, or None."""
        for exception in self.exceptions:
            if exception in line:
                return exception
        return None


def compile_keyword(keyword: str, exceptions: Iterable[str] = ()) -> CompiledPattern:
    """
    Compile one keyword. The keyword is escaped, so it always matches literally.

    Raises:
        PatternCompileError: If the resulting expression is rejected by ``re``
    """
    try:
        regex = re.compile(LINE_PATTERN.format(keyword=re.escape(keyword)), PATTERN_FLAGS)
    except re.error as e:
        raise PatternCompileError(keyword, str(e)) from e
    return CompiledPattern(keyword=keyword, regex=regex, exceptions=tuple(exceptions))


def compile_patterns(rules: Iterable[KeywordRule]) -> Dict[str, CompiledPattern]:
    """
    Build the keyword -> CompiledPattern mapping used by the matcher.

    Repeated keywords collapse into one pattern whose exceptions are the
    ordered union of every occurrence.

    Raises:
        PatternCompileError: If any keyword cannot be compiled
    """
    merged: Dict[str, list] = {}
    for rule in rules:
        exceptions = merged.setdefault(rule.keyword, [])
        for exception in rule.exceptions:
            if exception not in exceptions:
                exceptions.append(exception)

    return {
        keyword: compile_keyword(keyword, exceptions)
        for keyword, exceptions in merged.items()
    }
