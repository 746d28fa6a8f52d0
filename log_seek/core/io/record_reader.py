"""
Positioned record reading over a seekable binary handle.

Binary-search probes land on arbitrary byte offsets, usually in the middle
of a line. Reading "the rest of the current line" from such an offset gives
garbage, but the line after it always starts on a true line boundary. The
reader therefore allows exactly one fallback line: if the first line read
from ``offset`` is not timestamp-bearing, one more line is read and tested.
Two consecutive misses mean the position is unusable and ``None`` is
returned; callers decide what that means for them.
"""

from __future__ import annotations

import os
from datetime import datetime
from typing import BinaryIO, Callable

from log_seek.core.domain.types import Record

Recognizer = Callable[[str], datetime | None]

# first line at the offset plus one fallback line
MAX_READ_ATTEMPTS = 2

_BLANK_BYTES = b" \t\r\n"
_NEWLINE = ord("\n")

# bytes fetched per backward read during the last-line scan
SCAN_BLOCK_SIZE = 4096


def _decode(raw: bytes) -> str:
    return raw.decode("utf-8", errors="replace").strip()


def read_record_at(
    handle: BinaryIO,
    offset: int,
    recognizer: Recognizer,
) -> Record | None:
    """
    Read the first timestamp-bearing line at or after ``offset``.

    At most ``MAX_READ_ATTEMPTS`` lines are consumed. End of file counts as
    a miss. The returned record's ``end_offset`` is the byte right after the
    line that matched; ``start_offset`` is where reading of that line began
    (the probe offset itself when the first attempt matched).
    """
    handle.seek(offset)
    position = offset

    for _ in range(MAX_READ_ATTEMPTS):
        raw = handle.readline()
        if not raw:
            return None

        line_start = position
        position += len(raw)

        text = _decode(raw)
        timestamp = recognizer(text)
        if timestamp is not None:
            return Record(
                timestamp=timestamp,
                text=text,
                start_offset=line_start,
                end_offset=position,
            )

    return None


def _rewind_while(
    handle: BinaryIO,
    position: int,
    keep: Callable[[int], bool],
) -> int:
    """
    Step ``position`` back over every preceding byte for which ``keep`` holds.

    Bytes are inspected one at a time, but fetched in blocks of
    ``SCAN_BLOCK_SIZE`` read backwards from ``position``, so the handle is
    read about once per block rather than once per byte.
    """
    while position > 0:
        block_start = max(0, position - SCAN_BLOCK_SIZE)
        handle.seek(block_start)
        block = handle.read(position - block_start)

        for index in range(len(block) - 1, -1, -1):
            if not keep(block[index]):
                return block_start + index + 1

        position = block_start

    return 0


def read_last_record(handle: BinaryIO, recognizer: Recognizer) -> Record | None:
    """
    Locate the last non-blank line by scanning backwards byte by byte.

    Trailing whitespace, including any number of blank lines, is skipped
    first; the scan then stops at the preceding newline or at offset 0.
    Returns ``None`` for an empty (or all-blank) file and when the last line
    carries no recognizable timestamp.
    """
    position = handle.seek(0, os.SEEK_END)
    if position == 0:
        return None

    position = _rewind_while(handle, position, lambda byte: byte in _BLANK_BYTES)
    if position == 0:
        return None

    position = _rewind_while(handle, position, lambda byte: byte != _NEWLINE)

    handle.seek(position)
    raw = handle.readline()

    text = _decode(raw)
    timestamp = recognizer(text)
    if timestamp is None:
        return None

    return Record(
        timestamp=timestamp,
        text=text,
        start_offset=position,
        end_offset=position + len(raw),
    )
