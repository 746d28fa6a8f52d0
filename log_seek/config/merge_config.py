"""Merge run configuration model.

This module defines the MergeConfig schema used to parse and normalize the
command line (optionally layered over a JSON config file) into the window,
limits and inputs the merge runtime consumes.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from log_seek.core.domain.durations import parse_duration
from log_seek.core.domain.types import MergeWindow


class MergeConfig(BaseModel):
    """Validated merge configuration.

    JSON example:
        {
          "files": ["/var/log/app.log", "/var/log/worker.log"],
          "start": "2024-04-22T10:00:00Z",
          "duration": "15m",
          "lines": 500
        }

    ``start`` and ``end`` are inclusive; naive timestamps are read as UTC.
    ``duration`` fills in whichever bound is missing (see ``resolve_window``).
    """

    files: list[Path] = Field(..., min_length=1)

    start: datetime | None = None
    end: datetime | None = None
    duration: timedelta | None = None

    lines: int | None = Field(default=None, ge=0)

    # Year assumed for syslog-style timestamps; defaults to the current year
    syslog_year: int | None = Field(default=None, ge=1, le=9999)

    record_events: Path | None = None

    model_config = ConfigDict(extra="forbid")

    @classmethod
    def from_json_obj(cls, obj: dict[str, Any]) -> MergeConfig:
        """Create a MergeConfig instance from a JSON-compatible object."""
        return cls.model_validate(obj)

    @field_validator("duration", mode="before")
    @classmethod
    def _parse_duration_shorthand(cls, value: Any) -> Any:
        if isinstance(value, str):
            return parse_duration(value)
        return value

    @field_validator("start", "end", mode="after")
    @classmethod
    def _normalize_to_utc(cls, value: datetime | None) -> datetime | None:
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    @model_validator(mode="after")
    def validate_window(self) -> MergeConfig:
        """Validate that start, end and duration describe one window."""
        if self.start is not None and self.end is not None:
            if self.duration is not None:
                raise ValueError("start, end and duration cannot all be set")
            if self.end < self.start:
                raise ValueError("end must not be before start")

        if self.duration is not None and self.duration <= timedelta(0):
            raise ValueError("duration must be positive")

        return self

    def resolve_window(self, now: datetime) -> MergeWindow:
        """
        Turn start/end/duration into a concrete window.

        - start + duration  -> [start, start + duration]
        - end + duration    -> [end - duration, end]
        - duration alone    -> [now - duration, open]
        """
        start, end = self.start, self.end

        if self.duration is not None:
            if start is not None:
                end = start + self.duration
            elif end is not None:
                start = end - self.duration
            else:
                start = now - self.duration

        return MergeWindow(start=start, end=end)

    def reference_year(self, now: datetime) -> int:
        return self.syslog_year if self.syslog_year is not None else now.year
