"""Application shell: wires user intents to the timer, store and preferences.

The shell owns the session store and preference lifecycles (load once at
startup, persist on every mutation) and turns the engine's completion
events into stored ``Session`` records. The engine itself never sees the
store.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime
from pathlib import Path
from typing import Any

from studytimer_cli.exceptions import PersistenceWriteError
from studytimer_cli.models.config_models import AppConfig, Preferences
from studytimer_cli.models.focus.engine import SessionCompleted, TimerEngine, TimerSnapshot
from studytimer_cli.models.focus.goals import GoalProgress, GoalsManager
from studytimer_cli.models.focus.history import SessionHistory, write_csv
from studytimer_cli.models.focus.scheduler import Scheduler
from studytimer_cli.models.focus.summary import DailySummary, build_daily_summary
from studytimer_cli.models.session import KIND_LABELS, Session, SessionKind

from .config_service import ConfigService, PreferencesService
from .session_store import SessionStore

logger = logging.getLogger(__name__)


def _local_now() -> datetime:
    return datetime.now().astimezone()


class StudyTimerApp:
    """Orchestrates:
    - TimerEngine state and intents
    - Session history persistence
    - Daily goal and theme preferences
    - Snapshots for the presentation layer
    """

    def __init__(
        self,
        store: SessionStore,
        preferences: PreferencesService,
        scheduler: Scheduler,
        config: AppConfig | None = None,
        clock: Callable[[], datetime] = _local_now,
    ):
        self.config = config or AppConfig()
        self.store = store
        self.preferences_service = preferences
        self.goals = GoalsManager(store, preferences)
        self.engine = TimerEngine(scheduler, self.config.timer)
        self.clock = clock

        self.warnings: list[PersistenceWriteError] = []
        self.last_completed: Session | None = None
        self.status_message: str | None = None
        self._on_session_recorded: list[Callable[[Session], None]] = []

        self.engine.on("session_complete", self._handle_session_complete)

    @classmethod
    def from_config(
        cls, config_service: ConfigService, scheduler: Scheduler
    ) -> "StudyTimerApp":
        """Build an app on the configured data directory and load its state."""
        storage = config_service.get_storage()
        app = cls(
            store=SessionStore(storage),
            preferences=PreferencesService(storage),
            scheduler=scheduler,
            config=config_service.config,
        )
        return app.load()

    def load(self) -> "StudyTimerApp":
        """Read sessions and preferences. Never raises on bad data."""
        self.store.load()
        self.preferences_service.load()
        return self

    def close(self) -> None:
        self.engine.close()

    def on_session_recorded(self, fn: Callable[[Session], None]) -> None:
        """Call *fn* with each session after it has been stored."""
        self._on_session_recorded.append(fn)

    @property
    def preferences(self) -> Preferences:
        return self.preferences_service.preferences

    # ----- Timer intents -----
    def select_kind(self, kind: SessionKind) -> None:
        self.status_message = None
        self.engine.select_kind(kind)

    def set_custom_duration(self, minutes: int) -> bool:
        return self.engine.set_custom_duration(minutes)

    def start(self) -> bool:
        self.status_message = None
        return self.engine.start()

    def pause(self) -> bool:
        return self.engine.pause()

    def reset(self) -> None:
        self.status_message = None
        self.engine.reset()

    def set_notes(self, notes: str) -> None:
        self.engine.set_notes(notes)

    def set_auto_advance(self, enabled: bool) -> None:
        self.engine.set_auto_advance(enabled)

    # ----- Preference intents -----
    def set_goal(self, value: Any) -> int:
        """Set the daily goal (invalid input becomes 0). Returns the new goal."""
        self._record_warning(self.goals.set_goal(value))
        return self.goals.get_goal()

    def toggle_theme(self) -> bool:
        """Flip the theme. Returns True if dark mode is now on."""
        self._record_warning(self.preferences_service.toggle_dark_mode())
        return self.preferences.dark_mode

    # ----- History intents -----
    def export_csv(self, path: Path | str | None = None) -> Path:
        """Write the full history as CSV.

        Raises:
            PersistenceWriteError: If the export file cannot be written
        """
        target = Path(path) if path else Path(self.config.history.export_filename)
        written = write_csv(self.store.all(), target)
        logger.info("Exported %d sessions to %s", len(self.store), written)
        return written

    def clear_history(self) -> None:
        self._record_warning(self.store.clear())
        self.last_completed = None

    # ----- Snapshots -----
    def timer_snapshot(self) -> TimerSnapshot:
        return self.engine.snapshot()

    def goal_snapshot(self, now: datetime | None = None) -> GoalProgress:
        return self.goals.get_daily_progress(now=now or self.clock())

    def sessions_snapshot(self) -> tuple[Session, ...]:
        return self.store.all()

    def todays_study_sessions(self, now: datetime | None = None) -> list[Session]:
        return self.store.filter_today("study", now=now or self.clock())

    def summary_snapshot(self, now: datetime | None = None) -> DailySummary:
        return build_daily_summary(self.todays_study_sessions(now))

    def history_view(self, show_all: bool = False) -> SessionHistory:
        return SessionHistory(
            self.store.all(),
            page_size=self.config.history.page_size,
            show_all=show_all,
        )

    # ----- Internals -----
    def _record_warning(self, warning: PersistenceWriteError | None) -> None:
        if warning is not None:
            logger.warning("Persistence warning: %s", warning)
            self.warnings.append(warning)

    def _handle_session_complete(self, event: SessionCompleted) -> None:
        session = Session.create(
            duration=event.duration,
            notes=event.notes,
            kind=event.kind,
            now=self.clock(),
        )
        self._record_warning(self.store.append(session))
        session = self.store.all()[0]
        self.last_completed = session
        self.status_message = (
            f"🎉 Completed a {event.duration} minute {KIND_LABELS[event.kind].lower()}"
        )
        for fn in list(self._on_session_recorded):
            fn(session)
