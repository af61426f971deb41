"""Parse and format pause durations such as "500ms" and "1.5s"."""

import re

from ttsscript.errors import InvalidDurationError

_DURATION_RE = re.compile(r"^(\d+(?:\.\d+)?)\s*(ms|s)$", re.IGNORECASE)


def parse_duration(spec: str | int | None) -> int:
    """Convert a duration spec to milliseconds.

    Empty/None means no pause (0). Integers are taken as milliseconds.
    Anything else unparseable raises InvalidDurationError.
    """
    if spec is None:
        return 0
    if isinstance(spec, bool):
        raise InvalidDurationError(f"invalid duration {spec!r}")
    if isinstance(spec, int):
        if spec < 0:
            raise InvalidDurationError(f"negative duration {spec}")
        return spec

    text = str(spec).strip()
    if not text:
        return 0

    match = _DURATION_RE.match(text)
    if not match:
        raise InvalidDurationError(f"invalid duration '{spec}'")

    value = float(match.group(1))
    if match.group(2).lower() == "s":
        value *= 1000
    return int(round(value))


def format_duration(ms: int) -> str:
    """Format milliseconds as "2s" when whole seconds, else "750ms". 0 gives ""."""
    if ms == 0:
        return ""
    if ms % 1000 == 0:
        return f"{ms // 1000}s"
    return f"{ms}ms"
