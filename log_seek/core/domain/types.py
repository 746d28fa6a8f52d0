"""Core record and window types.

A Record is one timestamp-bearing line together with the byte offsets that
locate it in its source file. Records are immutable facts: the reader
produces them, cursors hold them, the scheduler emits them.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class Record:
    """
    A single parsed log line.

    ``end_offset`` is the byte position right after the line and is the
    resume point for the next read. ``start_offset`` is the position of the
    line's first byte.
    """

    timestamp: datetime
    text: str
    start_offset: int
    end_offset: int


@dataclass(frozen=True, slots=True)
class MergeWindow:
    """Inclusive ``[start, end]`` time range; either bound may be open."""

    start: datetime | None = None
    end: datetime | None = None

    def __post_init__(self) -> None:
        if self.start is not None and self.end is not None and self.end < self.start:
            raise ValueError(
                f"window end {self.end.isoformat()} is before start {self.start.isoformat()}"
            )

    @property
    def is_unbounded(self) -> bool:
        return self.start is None and self.end is None

    def admits(self, timestamp: datetime) -> bool:
        if self.start is not None and timestamp < self.start:
            return False
        if self.end is not None and timestamp > self.end:
            return False
        return True

    def covers_file(self, last_record: Record) -> bool:
        """A file is still relevant while its last record is not before ``start``."""
        return self.start is None or last_record.timestamp >= self.start
