"""
Merge domain events.

These events are immutable facts observed while opening sources and
draining the merge. They are consumed by loggers, recorders and the
metrics summary; they never influence merge order.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class CursorOpenedEvent:
    source: str
    pending_ts: datetime
    last_ts: datetime
    offset: int


@dataclass(frozen=True, slots=True)
class FileSkippedEvent:
    source: str
    reason: str
    detail: str | None = None


@dataclass(frozen=True, slots=True)
class CursorDroppedEvent:
    source: str
    # exhausted | stopped_early | outside_window | line_limit | closed
    reason: str
    emitted: int


@dataclass(frozen=True, slots=True)
class MergeCompletedEvent:
    sources_opened: int
    sources_skipped: int
    records_emitted: int

    window_start: datetime | None
    window_end: datetime | None
