"""
Semantic test: positioned reads allow exactly one fallback line.

Invariant:
read_record_at returns the first timestamp-bearing line among at most two
lines read from the offset; two misses (or end of file) yield None.
end_offset always points right after the returned line.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable

from log_seek.core.io.record_reader import read_record_at
from log_seek.core.timestamps.recognizer import TimestampRecognizer


def test_reads_line_at_boundary(write_log, iso_line, at, recognizer: TimestampRecognizer) -> None:
    path: Path = write_log("a.log", [iso_line("10:00:00", "a0"), iso_line("10:00:05", "a1")])
    first_len = len(iso_line("10:00:00", "a0")) + 1

    with path.open("rb") as handle:
        record = read_record_at(handle, 0, recognizer)

    assert record is not None
    assert record.timestamp == at("10:00:00")
    assert record.text == iso_line("10:00:00", "a0")
    assert record.start_offset == 0
    assert record.end_offset == first_len


def test_mid_line_offset_falls_back_to_next_line(
    write_log,
    iso_line: Callable[[str, str], str],
    at,
    recognizer: TimestampRecognizer,
) -> None:
    lines = [iso_line("10:00:00", "a0"), iso_line("10:00:05", "a1"), iso_line("10:00:10", "a2")]
    path = write_log("a.log", lines)
    second_start = len(lines[0]) + 1

    with path.open("rb") as handle:
        record = read_record_at(handle, 7, recognizer)

    assert record is not None
    assert record.timestamp == at("10:00:05")
    assert record.start_offset == second_start
    assert record.end_offset == second_start + len(lines[1]) + 1


def test_single_garbage_line_is_skipped(write_log, iso_line, at, recognizer) -> None:
    path = write_log("a.log", ["garbage without a date", iso_line("10:00:05", "a1")])

    with path.open("rb") as handle:
        record = read_record_at(handle, 0, recognizer)

    assert record is not None
    assert record.timestamp == at("10:00:05")


def test_two_garbage_lines_make_position_unusable(write_log, iso_line, recognizer) -> None:
    path = write_log(
        "a.log",
        ["garbage one", "garbage two", iso_line("10:00:05", "a1")],
    )

    with path.open("rb") as handle:
        assert read_record_at(handle, 0, recognizer) is None


def test_end_of_file_yields_none(write_log, iso_line, recognizer) -> None:
    path = write_log("a.log", [iso_line("10:00:00", "a0")])
    size = path.stat().st_size

    with path.open("rb") as handle:
        assert read_record_at(handle, size, recognizer) is None
        # rest of the only line, then end of file
        assert read_record_at(handle, 3, recognizer) is None


def test_text_is_stripped_and_crlf_tolerated(tmp_path: Path, at, recognizer) -> None:
    path = tmp_path / "crlf.log"
    path.write_bytes(b"2024-04-22T10:00:00 windows line\r\n2024-04-22T10:00:01 next\r\n")

    with path.open("rb") as handle:
        record = read_record_at(handle, 0, recognizer)

    assert record is not None
    assert record.text == "2024-04-22T10:00:00 windows line"
    assert record.end_offset == len(b"2024-04-22T10:00:00 windows line\r\n")
    assert record.timestamp == at("10:00:00")


def test_invalid_utf8_does_not_break_reading(tmp_path: Path, at, recognizer) -> None:
    path = tmp_path / "bin.log"
    path.write_bytes(b"\xff\xfe\xfd\n2024-04-22T10:00:02 after binary\n")

    with path.open("rb") as handle:
        record = read_record_at(handle, 0, recognizer)

    assert record is not None
    assert record.timestamp == at("10:00:02")
