from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, TextIO

from log_seek.config.merge_config import MergeConfig
from log_seek.core.domain.types import MergeWindow
from log_seek.core.events.event_bus import EventBus
from log_seek.core.events.events import CursorOpenedEvent, FileSkippedEvent, MergeCompletedEvent
from log_seek.core.events.sinks.collecting_sink import CollectingSink
from log_seek.core.events.sinks.file_recorder import FileRecorderSink
from log_seek.core.events.sinks.sink_logging import LoggingEventSink
from log_seek.core.merge.scheduler import MergeScheduler
from log_seek.core.seek.sources import open_sources
from log_seek.core.timestamps.recognizer import TimestampRecognizer

LOGGER = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True, slots=True)
class MergeRunSummary:
    window: MergeWindow
    sources_opened: int
    sources_skipped: int
    records_emitted: int


class MergeRunner:
    """
    Runs exactly one merge described by a MergeConfig.

    One runner call == one pass over the inputs == one output stream.
    The clock is injectable so that duration-only windows and the syslog
    reference year are deterministic under test.
    """

    def __init__(self, *, clock: Callable[[], datetime] = _utc_now) -> None:
        self._clock = clock

    def run(self, config: MergeConfig, *, out: TextIO) -> MergeRunSummary:
        now = self._clock()
        window = config.resolve_window(now)
        recognizer = TimestampRecognizer(config.reference_year(now))

        collector = CollectingSink()
        event_bus = EventBus(
            [
                collector,
                LoggingEventSink(logging.getLogger("log_seek.events")),
            ]
        )
        if config.record_events is not None:
            event_bus.register(FileRecorderSink(config.record_events))

        try:
            cursors = open_sources(
                config.files,
                start=window.start,
                recognizer=recognizer,
                event_bus=event_bus,
            )

            with MergeScheduler(
                window,
                line_limit=config.lines,
                event_bus=event_bus,
            ) as scheduler:
                scheduler.extend(cursors)
                emitted = scheduler.run(out)

            summary = MergeRunSummary(
                window=window,
                sources_opened=len(collector.of_type(CursorOpenedEvent)),
                sources_skipped=len(collector.of_type(FileSkippedEvent)),
                records_emitted=emitted,
            )

            event_bus.emit(
                MergeCompletedEvent(
                    sources_opened=summary.sources_opened,
                    sources_skipped=summary.sources_skipped,
                    records_emitted=summary.records_emitted,
                    window_start=window.start,
                    window_end=window.end,
                )
            )
        finally:
            event_bus.close()

        return summary
