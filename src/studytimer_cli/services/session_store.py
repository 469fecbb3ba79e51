"""In-memory session history synchronised to durable storage."""

from __future__ import annotations

import json
import logging
from datetime import datetime

from studytimer_cli.exceptions import PersistenceReadError, PersistenceWriteError
from studytimer_cli.models.session import Session, SessionKind

from .storage import FileKeyValueStorage

logger = logging.getLogger(__name__)

SESSIONS_KEY = "studySessions"


class SessionStore:
    """Ordered collection of completed sessions, newest first.

    The in-memory list is authoritative for the lifetime of the process.
    Every mutation is written through synchronously; a failed write is
    logged and handed back to the caller as a warning instead of raised.
    """

    def __init__(self, storage: FileKeyValueStorage):
        self.storage = storage
        self._sessions: list[Session] = []

    def __len__(self) -> int:
        return len(self._sessions)

    def load(self) -> list[Session]:
        """Load persisted sessions. Absent or malformed data yields []."""
        self._sessions = self._read()
        logger.debug("Loaded %d sessions", len(self._sessions))
        return list(self._sessions)

    def _read(self) -> list[Session]:
        try:
            raw = self.storage.get(SESSIONS_KEY)
        except PersistenceReadError as e:
            logger.warning("Session history unreadable, starting empty: %s", e)
            return []

        if raw is None:
            return []

        try:
            data = json.loads(raw)
            if not isinstance(data, list):
                raise ValueError("session history must be a JSON array")
            return [Session.from_dict(item) for item in data]
        except (json.JSONDecodeError, TypeError, KeyError, ValueError) as e:
            logger.warning("Session history malformed, starting empty: %s", e)
            return []

    def append(self, session: Session) -> PersistenceWriteError | None:
        """Insert *session* at the head and persist the full history.

        Returns:
            The write error if persisting failed, otherwise None
        """
        if any(existing.id == session.id for existing in self._sessions):
            session = session.with_unique_id()
        self._sessions.insert(0, session)
        return self._persist()

    def all(self) -> tuple[Session, ...]:
        """All sessions in current order (newest first)."""
        return tuple(self._sessions)

    def filter_today(
        self, kind: SessionKind, now: datetime | None = None
    ) -> list[Session]:
        """Sessions of *kind* whose local calendar date is today."""
        today = (now or datetime.now()).astimezone().date()
        return [
            session
            for session in self._sessions
            if session.kind == kind and session.local_date == today
        ]

    def clear(self) -> PersistenceWriteError | None:
        """Remove every session."""
        self._sessions = []
        return self._persist()

    def _persist(self) -> PersistenceWriteError | None:
        payload = json.dumps([session.to_dict() for session in self._sessions])
        try:
            self.storage.set(SESSIONS_KEY, payload)
        except PersistenceWriteError as e:
            logger.warning("Could not save session history: %s", e)
            return e
        return None
