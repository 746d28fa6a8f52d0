"""
Opening input files as seek cursors.

A file that cannot serve any record (missing, empty, no parseable first or
last line, entirely before the requested start) is skipped with a
FileSkippedEvent; the run continues with the remaining files. Permission
problems and other I/O failures are not skippable and propagate.
"""

from __future__ import annotations

import os
from datetime import datetime
from pathlib import Path
from typing import Iterable

from log_seek.core.events.event_bus import EventBus
from log_seek.core.events.events import CursorOpenedEvent, FileSkippedEvent
from log_seek.core.io.record_reader import Recognizer
from log_seek.core.seek.cursor import SeekCursor, SkipReason


def open_source(
    path: str | Path,
    *,
    start: datetime | None,
    recognizer: Recognizer,
    event_bus: EventBus,
) -> SeekCursor | None:
    source = str(path)

    try:
        handle = Path(path).open("rb")
    except (FileNotFoundError, IsADirectoryError) as exc:
        event_bus.emit(
            FileSkippedEvent(
                source=source,
                reason="cannot_open",
                detail=exc.strerror or str(exc),
            )
        )
        return None

    try:
        file_len = os.fstat(handle.fileno()).st_size
        outcome = SeekCursor.locate(handle, file_len, start, recognizer, source=source)
    except BaseException:
        handle.close()
        raise

    if isinstance(outcome, SkipReason):
        handle.close()
        event_bus.emit(FileSkippedEvent(source=source, reason=outcome.value))
        return None

    # locate() only returns a cursor with a pending record
    assert outcome.pending is not None
    event_bus.emit(
        CursorOpenedEvent(
            source=source,
            pending_ts=outcome.pending.timestamp,
            last_ts=outcome.last_record.timestamp,
            offset=outcome.pending.start_offset,
        )
    )
    return outcome


def open_sources(
    paths: Iterable[str | Path],
    *,
    start: datetime | None,
    recognizer: Recognizer,
    event_bus: EventBus,
) -> list[SeekCursor]:
    """Open every path in order; unusable files are left out of the result."""
    cursors: list[SeekCursor] = []

    try:
        for path in paths:
            cursor = open_source(
                path,
                start=start,
                recognizer=recognizer,
                event_bus=event_bus,
            )
            if cursor is not None:
                cursors.append(cursor)
    except BaseException:
        for cursor in cursors:
            cursor.close()
        raise

    return cursors
