"""
Logging event sink.
"""
from __future__ import annotations

import logging
from typing import Any

from log_seek.core.events.events import CursorDroppedEvent, FileSkippedEvent


class LoggingEventSink:
    """Logs merge events using the standard logging module.

    Skipped files and cursors that stopped before their last record are
    operator-visible problems and go out at WARNING; everything else is
    DEBUG.
    """

    def __init__(self, logger: logging.Logger) -> None:
        self._logger = logger

    def on_event(self, event: Any) -> None:
        if isinstance(event, FileSkippedEvent):
            self._logger.warning(
                "Skipping %s: %s%s",
                event.source,
                event.reason,
                f" ({event.detail})" if event.detail else "",
                extra={"event": event},
            )
            return

        if isinstance(event, CursorDroppedEvent) and event.reason == "stopped_early":
            self._logger.warning(
                "%s: two consecutive unparsable lines, stopped after %d records",
                event.source,
                event.emitted,
                extra={"event": event},
            )
            return

        self._logger.debug("merge_event", extra={"event": event})
