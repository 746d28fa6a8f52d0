from __future__ import annotations

import argparse
import json
import logging
import os
import sys
import time
from datetime import timedelta
from pathlib import Path
from typing import Any

from log_seek.config.merge_config import MergeConfig
from log_seek.core.domain.durations import format_duration
from log_seek.runtime.merge_runner import MergeRunner, MergeRunSummary
from log_seek.runtime.prometheus_metrics import PrometheusMetricsClient

LOGGER = logging.getLogger(__name__)

EXIT_IO_ERROR = 1
EXIT_USAGE = 2

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _load_json(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(path)
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a JSON object")
    return data


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="log-seek",
        description=(
            "Merge timestamp-ordered log files into one chronological stream, "
            "optionally limited to a time window."
        ),
    )

    parser.add_argument(
        "-s",
        "--start",
        type=str,
        help="Inclusive start timestamp (ISO-8601; naive means UTC).",
    )

    parser.add_argument(
        "-e",
        "--end",
        type=str,
        help="Inclusive end timestamp (ISO-8601; naive means UTC).",
    )

    parser.add_argument(
        "-d",
        "--duration",
        type=str,
        help="Window length such as 90s, 15m or 2h; combines with --start or --end.",
    )

    parser.add_argument(
        "-l",
        "--lines",
        type=int,
        help="Stop after this many output lines.",
    )

    parser.add_argument(
        "--config",
        type=Path,
        help="JSON file with the same fields; command-line flags override it.",
    )

    parser.add_argument(
        "--syslog-year",
        type=int,
        help="Year assumed for syslog timestamps (default: current year).",
    )

    parser.add_argument(
        "--record-events",
        type=Path,
        help="Append merge events (opened/skipped/dropped files) as JSON lines.",
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log debug diagnostics to stderr.",
    )

    parser.add_argument(
        "files",
        nargs="*",
        type=Path,
        help="Log files to merge.",
    )

    return parser


def config_from_args(args: argparse.Namespace) -> MergeConfig:
    raw: dict[str, Any] = {}

    if args.config is not None:
        raw.update(_load_json(args.config))

    overrides = {
        "start": args.start,
        "end": args.end,
        "duration": args.duration,
        "lines": args.lines,
        "syslog_year": args.syslog_year,
        "record_events": args.record_events,
    }
    raw.update({key: value for key, value in overrides.items() if value is not None})

    if args.files:
        raw["files"] = args.files

    return MergeConfig.from_json_obj(raw)


def _push_metrics(summary: MergeRunSummary, elapsed_seconds: float) -> None:
    metrics = PrometheusMetricsClient()
    if not metrics.is_enabled():
        return

    # --- Prometheus metrics (side-effect only) ---
    try:
        metrics.set_gauge(name="log_seek_records_emitted", value=float(summary.records_emitted))
        metrics.set_gauge(name="log_seek_sources_opened", value=float(summary.sources_opened))
        metrics.set_gauge(name="log_seek_sources_skipped", value=float(summary.sources_skipped))
        metrics.set_gauge(name="log_seek_duration_seconds", value=elapsed_seconds)
        metrics.push_all(job="log_seek_merge")
    except Exception:
        LOGGER.exception("Prometheus push failed")


def _silence_stdout() -> None:
    # Python flushes stdout at exit; point it at devnull so that flush
    # cannot raise BrokenPipeError a second time.
    devnull = os.open(os.devnull, os.O_WRONLY)
    os.dup2(devnull, sys.stdout.fileno())


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        config = config_from_args(args)
    except (ValueError, OSError) as exc:
        print(f"Error: invalid configuration: {exc}", file=sys.stderr)
        sys.exit(EXIT_USAGE)

    started = time.monotonic()

    try:
        summary = MergeRunner().run(config, out=sys.stdout)
        sys.stdout.flush()
    except BrokenPipeError:
        _silence_stdout()
        return
    except OSError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(EXIT_IO_ERROR)

    elapsed = time.monotonic() - started

    LOGGER.info(
        "Merged %d records from %d files (%d skipped) in %s",
        summary.records_emitted,
        summary.sources_opened,
        summary.sources_skipped,
        format_duration(timedelta(seconds=round(elapsed))),
    )

    _push_metrics(summary, elapsed)


if __name__ == "__main__":
    main()
