"""
Duration shorthand used on the command line.

Accepted input is an integer followed by a single unit suffix:
``s`` (seconds), ``m`` (minutes) or ``h`` (hours), e.g. ``"90s"``, ``"15m"``.
"""

from __future__ import annotations

from datetime import timedelta

_UNIT_SECONDS: dict[str, int] = {
    "s": 1,
    "m": 60,
    "h": 3600,
}


def parse_duration(raw: str) -> timedelta:
    """Parse ``<int><s|m|h>`` into a timedelta."""
    text = raw.strip()
    if len(text) < 2:
        raise ValueError(f"invalid duration {raw!r}: expected <number><s|m|h>")

    num_part, unit = text[:-1], text[-1]

    if unit not in _UNIT_SECONDS:
        raise ValueError(f"invalid duration {raw!r}: unknown unit {unit!r}")

    if not num_part.isdigit():
        raise ValueError(f"invalid duration {raw!r}: {num_part!r} is not a whole number")

    return timedelta(seconds=int(num_part) * _UNIT_SECONDS[unit])


def format_duration(value: timedelta) -> str:
    """
    Render a duration using the largest unit that divides it exactly.

    Days are only produced here, never parsed.
    """
    secs = int(value.total_seconds())

    if secs and secs % 86400 == 0:
        return f"{secs // 86400}d"
    if secs and secs % 3600 == 0:
        return f"{secs // 3600}h"
    if secs and secs % 60 == 0:
        return f"{secs // 60}m"
    return f"{secs}s"
