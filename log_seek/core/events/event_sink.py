"""
Event sink interface.

Sinks receive the events emitted while opening sources and draining the
merge: CursorOpenedEvent, FileSkippedEvent, CursorDroppedEvent and
MergeCompletedEvent. A sink that holds a resource exposes ``close()``;
EventBus.close() calls it at the end of the run.
"""
from __future__ import annotations

from typing import Any, Protocol


class EventSink(Protocol):
    def on_event(self, event: Any) -> None:
        ...
