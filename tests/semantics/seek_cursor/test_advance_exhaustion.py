"""
Semantic test: advancing a cursor.

Invariant:
advance() returns True while a pending record existed (even if none
follows) and False, without any state change, once the cursor is exhausted.
"""

from __future__ import annotations


def test_advance_walks_records_in_order(write_log, iso_line, at, open_cursor) -> None:
    path = write_log(
        "a.log",
        [iso_line("10:00:00", "a0"), iso_line("10:00:05", "a1"), iso_line("10:00:10", "a2")],
    )
    cursor = open_cursor(path)
    assert cursor is not None

    seen = [cursor.pending.timestamp]
    while cursor.advance() and cursor.pending is not None:
        seen.append(cursor.pending.timestamp)

    assert seen == [at("10:00:00"), at("10:00:05"), at("10:00:10")]
    assert cursor.exhausted


def test_advance_returns_true_on_transition_to_exhausted(write_log, iso_line, open_cursor) -> None:
    path = write_log("one.log", [iso_line("10:00:00", "only")])
    cursor = open_cursor(path)
    assert cursor is not None

    assert cursor.advance() is True
    assert cursor.pending is None


def test_advance_after_exhaustion_is_idempotent(write_log, iso_line, open_cursor) -> None:
    path = write_log("one.log", [iso_line("10:00:00", "only")])
    cursor = open_cursor(path)
    assert cursor is not None
    cursor.advance()

    last_record = cursor.last_record

    assert cursor.advance() is False
    assert cursor.advance() is False
    assert cursor.pending is None
    assert cursor.last_record is last_record
    assert not cursor.stopped_early


def test_pending_never_passes_last_record(write_log, iso_line, open_cursor) -> None:
    path = write_log(
        "a.log",
        [iso_line("10:00:00", "a0"), iso_line("10:00:05", "a1"), iso_line("10:00:10", "a2")],
        trailing="\n\n\n",
    )
    cursor = open_cursor(path)
    assert cursor is not None

    while cursor.pending is not None:
        assert cursor.pending.timestamp <= cursor.last_record.timestamp
        cursor.advance()


def test_single_garbage_line_is_stepped_over(write_log, iso_line, at, open_cursor) -> None:
    path = write_log(
        "a.log",
        [iso_line("10:00:00", "a0"), "  continuation of a0", iso_line("10:00:05", "a1")],
    )
    cursor = open_cursor(path)
    assert cursor is not None

    cursor.advance()

    assert cursor.pending is not None
    assert cursor.pending.timestamp == at("10:00:05")


def test_two_garbage_lines_stop_cursor_early(write_log, iso_line, open_cursor) -> None:
    path = write_log(
        "a.log",
        [
            iso_line("10:00:00", "a0"),
            "Traceback (most recent call last):",
            '  File "app.py", line 1',
            iso_line("10:00:05", "a1"),
        ],
    )
    cursor = open_cursor(path)
    assert cursor is not None

    assert cursor.advance() is True
    assert cursor.pending is None
    assert cursor.stopped_early
