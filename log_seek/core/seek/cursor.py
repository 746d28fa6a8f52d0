"""
Per-file seek cursor.

A SeekCursor owns one open binary handle and tracks the next record to be
emitted (``pending``) together with the file's last record. Opening a
cursor with a start time positions it on the first record at or after that
time using a binary search over byte offsets, so no file is ever read in
full to find its starting point.
"""

from __future__ import annotations

import logging
from datetime import datetime
from enum import StrEnum
from typing import BinaryIO

from log_seek.core.domain.types import Record
from log_seek.core.io.record_reader import Recognizer, read_last_record, read_record_at

LOGGER = logging.getLogger(__name__)


class SkipReason(StrEnum):
    EMPTY_FILE = "empty_file"
    NO_LAST_RECORD = "no_last_record"
    NO_FIRST_RECORD = "no_first_record"
    START_AFTER_LAST_RECORD = "start_after_last_record"
    UNUSABLE_SEEK_POSITION = "unusable_seek_position"


class SeekCursor:
    """
    Pull-based reader over the records of one file.

    Records are expected in non-decreasing timestamp order. That is a
    precondition of the file, it is not checked or corrected here.
    """

    def __init__(
        self,
        *,
        handle: BinaryIO,
        pending: Record,
        last_record: Record,
        recognizer: Recognizer,
        source: str = "",
    ) -> None:
        self._handle = handle
        self._recognizer = recognizer
        self._last_record = last_record
        self._stopped_early = False
        self._closed = False

        self.pending: Record | None = pending
        self.source = source

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def open(
        cls,
        handle: BinaryIO,
        file_len: int,
        start: datetime | None,
        recognizer: Recognizer,
        *,
        source: str = "",
    ) -> SeekCursor | None:
        """
        Build a cursor positioned on the first record at or after ``start``.

        Returns ``None`` when the file cannot serve any record for the
        request. The handle is only owned by the cursor on success.
        """
        outcome = cls.locate(handle, file_len, start, recognizer, source=source)
        if isinstance(outcome, SkipReason):
            return None
        return outcome

    @classmethod
    def locate(
        cls,
        handle: BinaryIO,
        file_len: int,
        start: datetime | None,
        recognizer: Recognizer,
        *,
        source: str = "",
    ) -> SeekCursor | SkipReason:
        """Same as ``open`` but reports why no cursor could be built."""
        if file_len == 0:
            return SkipReason.EMPTY_FILE

        last_record = read_last_record(handle, recognizer)
        if last_record is None:
            return SkipReason.NO_LAST_RECORD

        first = read_record_at(handle, 0, recognizer)
        if first is None:
            return SkipReason.NO_FIRST_RECORD

        if start is None or start <= first.timestamp:
            pending = first
        elif start > last_record.timestamp:
            return SkipReason.START_AFTER_LAST_RECORD
        else:
            found = _search_first_at_or_after(
                handle,
                start=start,
                high=last_record.start_offset,
                recognizer=recognizer,
            )
            if found is None:
                return SkipReason.UNUSABLE_SEEK_POSITION
            pending = found

        LOGGER.debug(
            "Cursor positioned",
            extra={
                "source": source,
                "offset": pending.start_offset,
                "pending_ts": pending.timestamp.isoformat(),
            },
        )

        return cls(
            handle=handle,
            pending=pending,
            last_record=last_record,
            recognizer=recognizer,
            source=source,
        )

    # ------------------------------------------------------------------
    # Iteration
    # ------------------------------------------------------------------

    @property
    def last_record(self) -> Record:
        return self._last_record

    @property
    def exhausted(self) -> bool:
        return self.pending is None

    @property
    def stopped_early(self) -> bool:
        """True when the cursor ran dry before reaching its last record."""
        return self._stopped_early

    def advance(self) -> bool:
        """
        Replace ``pending`` with the record that follows it.

        Returns False (and changes nothing) once the cursor is exhausted.
        Otherwise returns True, even when no further record was found;
        callers inspect ``pending`` to detect the end.
        """
        current = self.pending
        if current is None:
            return False

        self.pending = read_record_at(self._handle, current.end_offset, self._recognizer)

        if self.pending is None and current.end_offset < self._last_record.end_offset:
            self._stopped_early = True

        return True

    def close(self) -> None:
        if self._closed:
            return
        self._handle.close()
        self._closed = True

    def __enter__(self) -> SeekCursor:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __repr__(self) -> str:
        pending = self.pending.timestamp.isoformat() if self.pending else None
        return f"SeekCursor(source={self.source!r}, pending={pending})"


def _search_first_at_or_after(
    handle: BinaryIO,
    *,
    start: datetime,
    high: int,
    recognizer: Recognizer,
) -> Record | None:
    """
    Binary search over byte offsets for the first record with ts >= start.

    ``low`` only ever moves to the end offset of a record older than
    ``start``, so it always sits on a line boundary at or before the target.
    ``high`` is the start of the file's last line, which keeps every probe
    at least one full line away from end of file. Once the range is empty
    the remaining distance is walked line by line.
    """
    low = 0

    while low < high:
        mid = low + (high - low) // 2

        probe = read_record_at(handle, mid, recognizer)
        if probe is None:
            return None

        if probe.timestamp < start:
            low = probe.end_offset
        else:
            high = mid

    candidate = read_record_at(handle, low, recognizer)
    while candidate is not None and candidate.timestamp < start:
        candidate = read_record_at(handle, candidate.end_offset, recognizer)

    return candidate
