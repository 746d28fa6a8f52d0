"""Public API for the log_seek package.

Only symbols imported here are considered part of the stable,
supported external interface.
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

# ----------------------------------------------------------------------
# Configuration API
# ----------------------------------------------------------------------
from log_seek.config.merge_config import MergeConfig

# ----------------------------------------------------------------------
# Domain Types
# ----------------------------------------------------------------------
from log_seek.core.domain.durations import format_duration, parse_duration
from log_seek.core.domain.types import MergeWindow, Record

# ----------------------------------------------------------------------
# Reading, seeking and merging
# ----------------------------------------------------------------------
from log_seek.core.io.record_reader import read_last_record, read_record_at
from log_seek.core.merge.scheduler import MergeScheduler, pending_sort_key
from log_seek.core.seek.cursor import SeekCursor, SkipReason
from log_seek.core.seek.sources import open_source, open_sources
from log_seek.core.timestamps.recognizer import TimestampRecognizer

# ----------------------------------------------------------------------
# Runtime
# ----------------------------------------------------------------------
from log_seek.runtime.merge_runner import MergeRunner, MergeRunSummary

# ----------------------------------------------------------------------
# Public API definition
# ----------------------------------------------------------------------

__all__ = [
    # Config
    "MergeConfig",

    # Domain
    "Record",
    "MergeWindow",
    "parse_duration",
    "format_duration",
    "TimestampRecognizer",

    # Core
    "read_record_at",
    "read_last_record",
    "SeekCursor",
    "SkipReason",
    "open_source",
    "open_sources",
    "MergeScheduler",
    "pending_sort_key",

    # Runtime
    "MergeRunner",
    "MergeRunSummary",

    # Version
    "__version__",
]

# ----------------------------------------------------------------------
# Package version
# ----------------------------------------------------------------------

try:
    __version__ = version("log-seek")
except PackageNotFoundError:
    __version__ = "0.0.0"
