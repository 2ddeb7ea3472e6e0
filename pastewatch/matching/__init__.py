"""Keyword matching for paste bodies.

This module provides:
- CompiledPattern / compile_patterns: keyword -> whole-line matcher plus exceptions
- KeywordMatcher: evaluates a body against every compiled pattern
- MatchResult: keyword -> matched line hits for one body
"""

from .engine import KeywordMatcher
from .models import MatchResult
from .patterns import CompiledPattern, compile_keyword, compile_patterns

__all__ = [
    "KeywordMatcher",
    "MatchResult",
    "CompiledPattern",
    "compile_keyword",
    "compile_patterns",
]
