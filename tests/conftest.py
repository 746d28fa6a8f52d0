from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Iterator

import pytest

from log_seek.core.seek.cursor import SeekCursor
from log_seek.core.timestamps.recognizer import TimestampRecognizer

DAY = "2024-04-22"


@pytest.fixture
def recognizer() -> TimestampRecognizer:
    return TimestampRecognizer(reference_year=2024)


@pytest.fixture
def at() -> Callable[[str], datetime]:
    """``at("10:00:05")`` -> aware UTC datetime on the shared test day."""

    def _at(clock: str) -> datetime:
        return datetime.fromisoformat(f"{DAY}T{clock}").replace(tzinfo=timezone.utc)

    return _at


@pytest.fixture
def iso_line() -> Callable[[str, str], str]:
    def _line(clock: str, message: str = "") -> str:
        return f"{DAY}T{clock} {message}".rstrip()

    return _line


@pytest.fixture
def write_log(tmp_path: Path) -> Callable[..., Path]:
    def _write(name: str, lines: list[str], *, trailing: str = "\n") -> Path:
        path = tmp_path / name
        body = "\n".join(lines) + trailing if lines else ""
        path.write_bytes(body.encode("utf-8"))
        return path

    return _write


@pytest.fixture
def open_cursor(
    recognizer: TimestampRecognizer,
) -> Iterator[Callable[..., SeekCursor | None]]:
    opened: list[SeekCursor] = []

    def _open(path: Path, start: datetime | None = None) -> SeekCursor | None:
        handle = path.open("rb")
        cursor = SeekCursor.open(
            handle,
            path.stat().st_size,
            start,
            recognizer,
            source=path.name,
        )
        if cursor is None:
            handle.close()
        else:
            opened.append(cursor)
        return cursor

    yield _open

    for cursor in opened:
        cursor.close()
