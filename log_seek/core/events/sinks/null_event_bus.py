from __future__ import annotations

from typing import Any

from log_seek.core.events.event_bus import EventBus


class _DiscardSink:
    def on_event(self, event: Any) -> None:
        return


class NullEventBus(EventBus):
    """
    Bus for callers that merge without observing opens, skips or drops.

    ``MergeScheduler`` falls back to it when no bus is passed.
    """

    def __init__(self) -> None:
        super().__init__(sinks=[_DiscardSink()])
