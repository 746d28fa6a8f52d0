"""
In-memory sink.
"""
from __future__ import annotations

from typing import Any


class CollectingSink:
    """Keeps every event in arrival order; used for run summaries and tests."""

    def __init__(self) -> None:
        self.events: list[Any] = []

    def on_event(self, event: Any) -> None:
        self.events.append(event)

    def of_type(self, event_type: type) -> list[Any]:
        return [event for event in self.events if isinstance(event, event_type)]
