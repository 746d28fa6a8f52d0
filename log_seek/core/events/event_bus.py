"""
Synchronous fan-out of merge events.

The source opener and the merge scheduler emit events in the order things
happen to the inputs: a file is opened or skipped, then each cursor is
dropped exactly once, and the runner closes the stream with a completion
event. Sinks see that order unchanged.
"""
from __future__ import annotations

from typing import Any, Iterable

from log_seek.core.events.event_sink import EventSink


class EventBus:
    """Delivers every merge event to each registered sink, in registration order."""

    def __init__(self, sinks: Iterable[EventSink] | None = None) -> None:
        self._sinks: list[EventSink] = list(sinks) if sinks is not None else []
        self._closed = False

    def register(self, sink: EventSink) -> None:
        self._sinks.append(sink)

    def emit(self, event: Any) -> None:
        for sink in self._sinks:
            sink.on_event(event)

    def close(self) -> None:
        """
        Close sinks that hold resources (the JSONL recorder) once the run ends.

        Safe to call more than once.
        """
        if self._closed:
            return

        for sink in self._sinks:
            close_fn = getattr(sink, "close", None)
            if callable(close_fn):
                close_fn()

        self._closed = True
