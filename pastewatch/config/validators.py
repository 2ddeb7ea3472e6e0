"""Non-fatal configuration checks surfaced as warnings."""

import warnings
from typing import Any, Dict, List

SHORT_EXCEPTION_LENGTH = 3


def check_for_warnings(config_dict: Dict[str, Any]) -> List[str]:
    """
    Inspect a raw configuration mapping for settings that load but look wrong.

    Args:
        config_dict: Raw configuration dictionary (before model validation)

    Returns:
        List of warning messages
    """
    messages = []
    keywords = config_dict.get("keywords", [])
    if not isinstance(keywords, list):
        return messages

    seen = set()
    for entry in keywords:
        if not isinstance(entry, dict):
            continue
        keyword = entry.get("keyword")
        if not isinstance(keyword, str):
            continue

        if keyword in seen:
            messages.append(
                f"Keyword '{keyword}' is configured more than once; exceptions are merged"
            )
        seen.add(keyword)

        exceptions = entry.get("exceptions") or []
        if not isinstance(exceptions, list):
            continue
        for exception in exceptions:
            if not isinstance(exception, str) or not exception:
                continue
            # A line matching the keyword verbatim always contains such an exception
            if exception in keyword:
                messages.append(
                    f"Exception '{exception}' is part of keyword '{keyword}' "
                    "and suppresses most of its hits"
                )
            elif len(exception) < SHORT_EXCEPTION_LENGTH:
                messages.append(
                    f"Exception '{exception}' for keyword '{keyword}' is very short "
                    "and may suppress unrelated hits"
                )

    return messages


def emit_warnings(warning_messages: List[str]) -> None:
    """Emit each message through the warnings module."""
    for message in warning_messages:
        warnings.warn(message, UserWarning, stacklevel=2)
