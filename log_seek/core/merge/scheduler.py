"""
K-way streaming merge over seek cursors.

The scheduler keeps one entry per live cursor in a binary min-heap keyed by
``pending_sort_key``. Each step removes the cursor with the oldest pending
record, emits that record, advances the cursor and puts it back if its new
pending record is still inside the window. Memory use is one pending record
per file regardless of file size.

Global output order is non-decreasing as long as every input file is itself
non-decreasing. A file that is internally out of order is passed through as
is; its disorder is not repaired.
"""

from __future__ import annotations

import heapq
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable, Iterator, TextIO

from log_seek.core.domain.types import MergeWindow, Record
from log_seek.core.events.event_bus import EventBus
from log_seek.core.events.events import CursorDroppedEvent
from log_seek.core.events.sinks.null_event_bus import NullEventBus
from log_seek.core.seek.cursor import SeekCursor

LOGGER = logging.getLogger(__name__)

_FAR_FUTURE = datetime.max.replace(tzinfo=timezone.utc)

SortKey = tuple[int, datetime]


def pending_sort_key(cursor: SeekCursor) -> SortKey:
    """
    Ordering key for the merge heap: oldest pending timestamp first.

    A cursor without a pending record sorts after every live cursor.
    """
    if cursor.pending is None:
        return (1, _FAR_FUTURE)
    return (0, cursor.pending.timestamp)


@dataclass(slots=True)
class _Lane:
    cursor: SeekCursor
    # input position, breaks timestamp ties in favour of earlier files
    order: int
    emitted: int = 0


class MergeScheduler:
    """
    Emits the records of all added cursors in global timestamp order.

    Cursors should be opened with ``window.start`` so that their first
    pending record already respects the lower bound; the scheduler enforces
    the upper bound and drops files whose last record precedes ``start``.
    The scheduler owns every cursor added to it and closes each one when it
    is dropped.
    """

    def __init__(
        self,
        window: MergeWindow | None = None,
        *,
        line_limit: int | None = None,
        event_bus: EventBus | None = None,
    ) -> None:
        if line_limit is not None and line_limit < 0:
            raise ValueError("line_limit must be >= 0")

        self._window = window if window is not None else MergeWindow()
        self._line_limit = line_limit
        self._event_bus = event_bus if event_bus is not None else NullEventBus()

        self._heap: list[tuple[SortKey, int, _Lane]] = []
        self._next_order = 0
        self._emitted = 0

    @property
    def window(self) -> MergeWindow:
        return self._window

    @property
    def emitted(self) -> int:
        return self._emitted

    def __len__(self) -> int:
        return len(self._heap)

    # ------------------------------------------------------------------
    # Heap maintenance
    # ------------------------------------------------------------------

    def add(self, cursor: SeekCursor) -> bool:
        """Take ownership of ``cursor``; returns False if it was dropped at once."""
        lane = _Lane(cursor=cursor, order=self._next_order)
        self._next_order += 1

        if not self._in_window(cursor):
            self._drop(lane, "exhausted" if cursor.pending is None else "outside_window")
            return False

        self._push(lane)
        return True

    def extend(self, cursors: Iterable[SeekCursor]) -> int:
        return sum(1 for cursor in cursors if self.add(cursor))

    def _push(self, lane: _Lane) -> None:
        heapq.heappush(self._heap, (pending_sort_key(lane.cursor), lane.order, lane))

    def _in_window(self, cursor: SeekCursor) -> bool:
        pending = cursor.pending
        if pending is None:
            return False
        if not self._window.covers_file(cursor.last_record):
            return False
        return self._window.end is None or pending.timestamp <= self._window.end

    def _drop(self, lane: _Lane, reason: str) -> None:
        lane.cursor.close()
        LOGGER.debug(
            "Cursor dropped",
            extra={"source": lane.cursor.source, "reason": reason, "emitted": lane.emitted},
        )
        self._event_bus.emit(
            CursorDroppedEvent(
                source=lane.cursor.source,
                reason=reason,
                emitted=lane.emitted,
            )
        )

    # ------------------------------------------------------------------
    # Draining
    # ------------------------------------------------------------------

    def _limit_reached(self) -> bool:
        return self._line_limit is not None and self._emitted >= self._line_limit

    def drain(self) -> Iterator[Record]:
        """
        Yield records oldest first until every cursor is exhausted.

        The source cursor is advanced and re-queued before its record is
        yielded, so abandoning the iterator early leaves every live cursor
        in the heap where ``close()`` can reach it.
        """
        while self._heap:
            if self._limit_reached():
                self.close(reason="line_limit")
                return

            _key, _order, lane = heapq.heappop(self._heap)
            cursor = lane.cursor
            record = cursor.pending
            if record is not None:
                lane.emitted += 1
                self._emitted += 1

            cursor.advance()

            if self._in_window(cursor):
                self._push(lane)
            elif cursor.pending is None:
                self._drop(lane, "stopped_early" if cursor.stopped_early else "exhausted")
            else:
                self._drop(lane, "outside_window")

            if record is not None:
                yield record

    def run(self, out: TextIO) -> int:
        """Write every drained record's line to ``out``; returns the count."""
        written = 0
        for record in self.drain():
            out.write(record.text)
            out.write("\n")
            written += 1
        return written

    def close(self, reason: str = "closed") -> None:
        while self._heap:
            _key, _order, lane = heapq.heappop(self._heap)
            self._drop(lane, reason)

    def __enter__(self) -> MergeScheduler:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
