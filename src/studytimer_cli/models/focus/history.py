"""Session history view and CSV export."""

from __future__ import annotations

import csv
import io
from collections.abc import Iterable, Sequence
from datetime import datetime, timedelta
from pathlib import Path
from typing import NamedTuple

from studytimer_cli.exceptions import PersistenceWriteError
from studytimer_cli.models.session import Session

EXPORT_FILENAME = "study-sessions.csv"
EXPORT_MIME_TYPE = "text/csv"
EXPORT_HEADER = ("Date", "Duration (minutes)", "Type", "Notes")
DEFAULT_PAGE_SIZE = 10


class SessionHistory:
    """Read-only, paginated projection over the session list.

    Shows the most recent ``page_size`` sessions until expanded; expanding
    reuses the same in-memory sequence.
    """

    def __init__(
        self,
        sessions: Sequence[Session],
        page_size: int = DEFAULT_PAGE_SIZE,
        show_all: bool = False,
    ):
        self.sessions = tuple(sessions)
        self.page_size = page_size
        self.show_all = show_all

    def __len__(self) -> int:
        return len(self.sessions)

    @property
    def has_more(self) -> bool:
        """True when the list is longer than one page."""
        return len(self.sessions) > self.page_size

    @property
    def hidden_count(self) -> int:
        if self.show_all:
            return 0
        return max(0, len(self.sessions) - self.page_size)

    def visible(self) -> list[Session]:
        if self.show_all:
            return list(self.sessions)
        return list(self.sessions[: self.page_size])

    def toggle_show_all(self) -> bool:
        self.show_all = not self.show_all
        return self.show_all


class ExportRow(NamedTuple):
    """One parsed row of an exported CSV file."""

    date: str
    duration: int
    type: str
    notes: str


def _quote(text: str) -> str:
    return '"' + text.replace('"', '""') + '"'


def export_csv(sessions: Iterable[Session]) -> str:
    """
    Serialize sessions as comma-delimited text.

    Header ``Date,Duration (minutes),Type,Notes``; one row per session in
    the given order. The date is the full ISO 8601 timestamp and the notes
    field is always quoted, with embedded quotes doubled.
    """
    lines = [",".join(EXPORT_HEADER)]
    for session in sessions:
        lines.append(
            ",".join(
                [
                    session.timestamp.isoformat(),
                    str(session.duration),
                    session.kind,
                    _quote(session.notes),
                ]
            )
        )
    return "\n".join(lines)


def parse_csv(text: str) -> list[ExportRow]:
    """Parse text produced by ``export_csv``.

    Raises:
        ValueError: If the header is missing or a row is malformed
    """
    reader = csv.reader(io.StringIO(text, newline=""))
    header = next(reader, None)
    if header is None or tuple(header) != EXPORT_HEADER:
        raise ValueError(f"Unexpected CSV header: {header}")

    rows = []
    for line_no, record in enumerate(reader, start=2):
        if not record:
            continue
        if len(record) != len(EXPORT_HEADER):
            raise ValueError(f"Line {line_no}: expected 4 fields, got {len(record)}")
        date, duration, kind, notes = record
        rows.append(ExportRow(date=date, duration=int(duration), type=kind, notes=notes))
    return rows


def write_csv(sessions: Iterable[Session], path: Path | str) -> Path:
    """Write the export to *path*.

    Raises:
        PersistenceWriteError: If the file cannot be written
    """
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8", newline="") as f:
            f.write(export_csv(sessions))
            f.write("\n")
    except OSError as e:
        raise PersistenceWriteError(str(path), str(e)) from e
    return path


def format_relative_date(timestamp: datetime, now: datetime | None = None) -> str:
    """On-screen label: 'Today, 09:30', 'Yesterday, 18:05' or '2024-03-01, 07:15'."""
    local = timestamp.astimezone()
    today = (now or datetime.now()).astimezone().date()
    clock = local.strftime("%H:%M")

    if local.date() == today:
        return f"Today, {clock}"
    if local.date() == today - timedelta(days=1):
        return f"Yesterday, {clock}"
    return f"{local.date().isoformat()}, {clock}"
