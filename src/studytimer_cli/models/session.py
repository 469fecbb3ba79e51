"""Completed study session record."""

import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Literal

SessionKind = Literal["study", "short-break", "long-break"]

SESSION_KINDS: tuple[SessionKind, ...] = ("study", "short-break", "long-break")

KIND_LABELS: dict[str, str] = {
    "study": "Study Session",
    "short-break": "Short Break",
    "long-break": "Long Break",
}


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO 8601 string, accepting a trailing 'Z' for UTC."""
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


@dataclass(frozen=True)
class Session:
    """A completed timed interval. Never mutated after creation."""

    id: str
    timestamp: datetime
    duration: int  # minutes
    notes: str = ""
    kind: SessionKind = "study"

    def __post_init__(self):
        if isinstance(self.duration, bool) or not isinstance(self.duration, int):
            raise ValueError(f"duration must be an integer, got {self.duration!r}")
        if self.duration < 0:
            raise ValueError("duration must be >= 0")
        if self.kind not in SESSION_KINDS:
            raise ValueError(f"Unknown session kind: {self.kind!r}")
        if not isinstance(self.notes, str):
            raise ValueError("notes must be text")

    @property
    def local_date(self):
        """Calendar date of the session in the local timezone."""
        return self.timestamp.astimezone().date()

    @property
    def label(self) -> str:
        return KIND_LABELS[self.kind]

    def to_dict(self) -> dict:
        """Convert to the persisted JSON shape."""
        return {
            "id": self.id,
            "date": self.timestamp.isoformat(),
            "duration": self.duration,
            "notes": self.notes,
            "type": self.kind,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Session":
        """Create from the persisted JSON shape.

        Raises:
            KeyError: If a required field is missing
            ValueError: If a field has the wrong type or value
        """
        if not isinstance(data, dict):
            raise ValueError("session record must be an object")
        raw_date = data["date"]
        if not isinstance(raw_date, str):
            raise ValueError("date must be an ISO 8601 string")
        return cls(
            id=str(data["id"]),
            timestamp=parse_timestamp(raw_date),
            duration=data["duration"],
            notes=data.get("notes") or "",
            kind=data["type"],
        )

    @staticmethod
    def create(
        duration: int,
        notes: str,
        kind: SessionKind,
        now: datetime | None = None,
    ) -> "Session":
        """Create a new session stamped with the current instant."""
        now = now or datetime.now().astimezone()
        return Session(
            id=str(int(now.timestamp() * 1000)),
            timestamp=now,
            duration=duration,
            notes=notes,
            kind=kind,
        )

    def with_unique_id(self) -> "Session":
        """Copy of this session with a uuid suffix on its id."""
        return Session(
            id=f"{self.id}-{uuid.uuid4().hex[:8]}",
            timestamp=self.timestamp,
            duration=self.duration,
            notes=self.notes,
            kind=self.kind,
        )
