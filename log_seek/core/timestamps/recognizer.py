"""
Line-prefix timestamp recognition.

Recognized prefixes, tried in order (first match wins):

- ISO-8601 compact:  ``2024-04-22T11:02:53``  (naive, read as UTC)
- ISO-8601 spaced:   ``2024-04-22 11:02:53`` with an optional offset
  suffix ``+01``, ``-0800`` or ``+05:30`` (converted to UTC)
- syslog:            ``Apr 22 11:02:53``  (year supplied by the caller)

All returned datetimes are timezone-aware UTC.
"""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone

_ISO_LEN = 19
_SYSLOG_LEN = 15

_ISO_COMPACT_FMT = "%Y-%m-%dT%H:%M:%S"
_ISO_SPACED_FMT = "%Y-%m-%d %H:%M:%S"

_OFFSET_RE = re.compile(r"^([+-])(\d{2})(?::?(\d{2}))?")

_MONTHS = {
    "Jan": 1, "Feb": 2, "Mar": 3, "Apr": 4, "May": 5, "Jun": 6,
    "Jul": 7, "Aug": 8, "Sep": 9, "Oct": 10, "Nov": 11, "Dec": 12,
}

_SYSLOG_RE = re.compile(
    r"^(?P<mon>[A-Z][a-z]{2}) (?P<day>[ \d]\d) "
    r"(?P<hh>\d{2}):(?P<mm>\d{2}):(?P<ss>\d{2})$"
)


def _has_iso_shape(line: str, separator: str) -> bool:
    return (
        len(line) >= _ISO_LEN
        and line[4] == "-"
        and line[7] == "-"
        and line[10] == separator
        and line[13] == ":"
        and line[16] == ":"
    )


def is_iso8601(line: str) -> bool:
    return _has_iso_shape(line, "T")


def is_iso8601_spaced(line: str) -> bool:
    return _has_iso_shape(line, " ")


def is_iso8601_spaced_tz(line: str) -> bool:
    return is_iso8601_spaced(line) and len(line) > _ISO_LEN and line[_ISO_LEN] in "+-"


def is_syslog(line: str) -> bool:
    return len(line) >= _SYSLOG_LEN and line[:3] in _MONTHS


def _parse_naive_utc(prefix: str, fmt: str) -> datetime | None:
    try:
        return datetime.strptime(prefix, fmt).replace(tzinfo=timezone.utc)
    except ValueError:
        return None


def _parse_offset(suffix: str) -> timezone | None:
    match = _OFFSET_RE.match(suffix)
    if match is None:
        return None

    sign, hours, minutes = match.groups()
    delta = timedelta(hours=int(hours), minutes=int(minutes or 0))
    if delta >= timedelta(hours=24):
        return None

    return timezone(-delta if sign == "-" else delta)


class TimestampRecognizer:
    """
    Callable that extracts the leading timestamp of a log line.

    ``reference_year`` supplies the year for syslog lines, which carry none.
    It is fixed at construction so that results never depend on the wall
    clock at parse time.
    """

    def __init__(self, reference_year: int) -> None:
        self._reference_year = reference_year

    @property
    def reference_year(self) -> int:
        return self._reference_year

    def __call__(self, line: str) -> datetime | None:
        if is_iso8601(line):
            return _parse_naive_utc(line[:_ISO_LEN], _ISO_COMPACT_FMT)

        if is_iso8601_spaced(line):
            parsed = _parse_naive_utc(line[:_ISO_LEN], _ISO_SPACED_FMT)
            if parsed is None or not is_iso8601_spaced_tz(line):
                return parsed

            offset = _parse_offset(line[_ISO_LEN:])
            if offset is None:
                return None
            return parsed.replace(tzinfo=offset).astimezone(timezone.utc)

        if is_syslog(line):
            return self._parse_syslog(line[:_SYSLOG_LEN])

        return None

    def _parse_syslog(self, prefix: str) -> datetime | None:
        match = _SYSLOG_RE.match(prefix)
        if match is None:
            return None

        try:
            return datetime(
                self._reference_year,
                _MONTHS[match["mon"]],
                int(match["day"]),
                int(match["hh"]),
                int(match["mm"]),
                int(match["ss"]),
                tzinfo=timezone.utc,
            )
        except (KeyError, ValueError):
            # unknown month or out-of-range field (e.g. Feb 29 in a common year)
            return None
