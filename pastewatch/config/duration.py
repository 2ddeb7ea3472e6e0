"""Duration parsing for interval settings such as poll_interval and retention."""

import re


class DurationParseError(ValueError):
    """Raised when a duration string cannot be parsed."""


_ISO_PATTERN = re.compile(
    r"^P(?:(\d+)D)?(?:T(?:(\d+)H)?(?:(\d+)M)?(?:(\d+(?:\.\d+)?)S)?)?$"
)
_HUMAN_TOKEN = re.compile(r"(\d+)\s*([smhd])")
_UNIT_SECONDS = {"s": 1, "m": 60, "h": 3600, "d": 86400}


def parse_duration(value) -> int:
    """
    Parse a duration into whole seconds.

    Accepts plain integers (already seconds), human-readable strings such as
    "30s", "1m" or "1h30m", and ISO-8601 durations such as "PT1M".

    Raises:
        DurationParseError: If the value is empty, malformed or zero
    """
    if isinstance(value, bool):
        raise DurationParseError(f"Invalid duration: {value!r}")
    if isinstance(value, int):
        if value <= 0:
            raise DurationParseError(f"Duration must be positive: {value}")
        return value

    text = str(value).strip()
    if not text:
        raise DurationParseError("Duration string cannot be empty")

    if text.upper().startswith("P"):
        seconds = _parse_iso8601(text.upper())
    else:
        seconds = _parse_human(text.lower())

    if seconds == 0:
        raise DurationParseError(f"Duration cannot be zero: '{text}'")
    return seconds


def _parse_iso8601(text: str) -> int:
    match = _ISO_PATTERN.match(text)
    if not match:
        raise DurationParseError(
            f"Invalid ISO-8601 duration: '{text}'. Expected e.g. 'PT1M' or 'PT10M'"
        )
    days, hours, minutes, seconds = match.groups()
    return (
        int(days or 0) * 86400
        + int(hours or 0) * 3600
        + int(minutes or 0) * 60
        + int(float(seconds or 0))
    )


def _parse_human(text: str) -> int:
    tokens = _HUMAN_TOKEN.findall(text)
    if not tokens:
        raise DurationParseError(
            f"Invalid duration: '{text}'. Expected e.g. '1s', '1m', '10m' or '1h30m'"
        )

    consumed = "".join(f"{num}{unit}" for num, unit in tokens)
    if consumed != re.sub(r"\s+", "", text):
        raise DurationParseError(
            f"Invalid characters in duration: '{text}'. "
            "Use digits with units s, m, h or d"
        )

    return sum(int(num) * _UNIT_SECONDS[unit] for num, unit in tokens)


def validate_duration_range(
    seconds: int,
    min_seconds: int,
    max_seconds: int,
    label: str = "Duration",
) -> None:
    """
    Check that a parsed duration lies within [min_seconds, max_seconds].

    Raises:
        DurationParseError: If the duration is out of range
    """
    if seconds < min_seconds:
        raise DurationParseError(
            f"{label} too short: {humanize_seconds(seconds)}. "
            f"Minimum is {humanize_seconds(min_seconds)}."
        )
    if seconds > max_seconds:
        raise DurationParseError(
            f"{label} too long: {humanize_seconds(seconds)}. "
            f"Maximum is {humanize_seconds(max_seconds)}."
        )


def humanize_seconds(seconds: int) -> str:
    """Render seconds as "1 minute", "10 minutes", "2 hours" and so on."""
    for unit, size in (("day", 86400), ("hour", 3600), ("minute", 60)):
        if seconds >= size and seconds % size == 0:
            count = seconds // size
            return f"{count} {unit}{'s' if count != 1 else ''}"
    return f"{seconds} second{'s' if seconds != 1 else ''}"
