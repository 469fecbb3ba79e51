"""Countdown state machine for study and break sessions.

The engine owns the timer state exclusively. It is driven by a ``Scheduler``
(one recurring tick while running, one delayed auto-start after completion)
and reports completed sessions to listeners; it never touches storage.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable
from dataclasses import dataclass
from typing import Literal

from studytimer_cli.exceptions import InvalidInputError
from studytimer_cli.models.config_models import TimerConfig
from studytimer_cli.models.session import SESSION_KINDS, SessionKind

from .scheduler import Handle, Scheduler

logger = logging.getLogger(__name__)

TimerPhase = Literal["idle", "running", "paused", "completed"]
TimerEvent = Literal["tick", "state_change", "session_complete"]


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    return int(math.floor(value + 0.5))


def completed_minutes(total_seconds: int) -> int:
    """Minutes credited for a run that counted all the way down."""
    return round_half_up(total_seconds / 60)


def next_kind(kind: SessionKind) -> SessionKind:
    """Kind that follows *kind* when auto-advancing."""
    if kind == "study":
        return "short-break"
    return "study"


@dataclass(frozen=True)
class SessionCompleted:
    """Emitted when a run reaches zero with a non-zero credited duration."""

    duration: int  # minutes
    notes: str
    kind: SessionKind


@dataclass(frozen=True)
class TimerSnapshot:
    """Immutable view of the timer state."""

    kind: SessionKind
    total_seconds: int
    remaining_seconds: int
    running: bool
    notes: str
    auto_advance: bool
    phase: TimerPhase
    auto_start_pending: bool = False

    @property
    def elapsed_seconds(self) -> int:
        return self.total_seconds - self.remaining_seconds

    @property
    def progress_percent(self) -> float:
        """Share of the current run already elapsed, 0-100."""
        if self.total_seconds <= 0:
            return 0.0
        return self.elapsed_seconds / self.total_seconds * 100


class TimerEngine:
    """
    Single active countdown.

    Idle -> Running -> (Paused <-> Running) -> Completed.
    Completed returns to Idle on reset, on a kind change, or on its own when
    auto-advance switches to the next kind. Kind or duration changes from any
    state stop the run without credit.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        config: TimerConfig | None = None,
        kind: SessionKind = "study",
    ):
        self.scheduler = scheduler
        self.config = config or TimerConfig()

        self._check_kind(kind)
        self.kind: SessionKind = kind
        self.total_seconds = self.config.default_seconds(kind)
        self.remaining_seconds = self.total_seconds
        self.running = False
        self.notes = ""
        self.auto_advance = False

        self._tick_handle: Handle | None = None
        self._auto_start_handle: Handle | None = None
        self._listeners: dict[str, list[Callable]] = {
            "tick": [],
            "state_change": [],
            "session_complete": [],
        }

    # ----- Listeners -----
    def on(self, event: TimerEvent, fn: Callable) -> None:
        """Register a listener.

        ``tick`` and ``state_change`` listeners receive a ``TimerSnapshot``;
        ``session_complete`` listeners receive a ``SessionCompleted``.
        """
        if event not in self._listeners:
            raise ValueError(f"Unknown timer event: {event}")
        self._listeners[event].append(fn)

    def _emit(self, event: TimerEvent, payload) -> None:
        for fn in list(self._listeners[event]):
            fn(payload)

    def _emit_state_change(self) -> None:
        self._emit("state_change", self.snapshot())

    # ----- State -----
    @property
    def phase(self) -> TimerPhase:
        if self.running:
            return "running"
        if self.remaining_seconds == 0:
            return "completed"
        if self.remaining_seconds < self.total_seconds:
            return "paused"
        return "idle"

    @property
    def auto_start_pending(self) -> bool:
        return self._auto_start_handle is not None and self._auto_start_handle.active

    def snapshot(self) -> TimerSnapshot:
        return TimerSnapshot(
            kind=self.kind,
            total_seconds=self.total_seconds,
            remaining_seconds=self.remaining_seconds,
            running=self.running,
            notes=self.notes,
            auto_advance=self.auto_advance,
            phase=self.phase,
            auto_start_pending=self.auto_start_pending,
        )

    # ----- Intents -----
    def select_kind(self, kind: SessionKind) -> None:
        """Switch session kind, discarding any progress on the current run."""
        self._check_kind(kind)
        self._cancel_auto_start()
        self._stop_ticking()
        self._load_kind(kind)
        logger.debug("Selected %s (%ss)", kind, self.total_seconds)
        self._emit_state_change()

    def set_custom_duration(self, minutes: int) -> bool:
        """Replace the current duration. Returns False if *minutes* is rejected."""
        if isinstance(minutes, bool) or not isinstance(minutes, int) or minutes <= 0:
            logger.debug("Ignoring custom duration %r", minutes)
            return False

        self._cancel_auto_start()
        self._stop_ticking()
        self.total_seconds = minutes * 60
        self.remaining_seconds = self.total_seconds
        self._emit_state_change()
        return True

    def start(self) -> bool:
        """Begin or resume counting down. Returns False if nothing started."""
        self._cancel_auto_start()
        if self.running or self.remaining_seconds <= 0:
            return False

        self.running = True
        self._tick_handle = self.scheduler.schedule_every(
            self.config.tick_interval_seconds, self._tick
        )
        logger.debug("Started %s with %ss remaining", self.kind, self.remaining_seconds)
        self._emit_state_change()
        return True

    def pause(self) -> bool:
        """Stop counting down, keeping the remaining time."""
        self._cancel_auto_start()
        if not self.running:
            return False
        self._stop_ticking()
        self._emit_state_change()
        return True

    def reset(self) -> None:
        """Restore the full duration of the current kind."""
        self._cancel_auto_start()
        self._stop_ticking()
        self.remaining_seconds = self.total_seconds
        self._emit_state_change()

    def set_notes(self, notes: str) -> None:
        self.notes = notes or ""

    def set_auto_advance(self, enabled: bool) -> None:
        self.auto_advance = bool(enabled)
        if not self.auto_advance:
            self._cancel_auto_start()
        self._emit_state_change()

    def close(self) -> None:
        """Cancel every scheduled callback."""
        self._cancel_auto_start()
        self._stop_ticking()

    # ----- Internals -----
    @staticmethod
    def _check_kind(kind: str) -> None:
        if kind not in SESSION_KINDS:
            raise InvalidInputError(
                f"Invalid session kind: {kind}. Must be one of {list(SESSION_KINDS)}"
            )

    def _load_kind(self, kind: SessionKind) -> None:
        self.kind = kind
        self.total_seconds = self.config.default_seconds(kind)
        self.remaining_seconds = self.total_seconds

    def _stop_ticking(self) -> None:
        self.running = False
        if self._tick_handle is not None:
            self._tick_handle.cancel()
            self._tick_handle = None

    def _cancel_auto_start(self) -> None:
        if self._auto_start_handle is not None:
            self._auto_start_handle.cancel()
            self._auto_start_handle = None

    def _tick(self) -> None:
        if not self.running:
            return

        self.remaining_seconds = max(0, self.remaining_seconds - 1)
        self._emit("tick", self.snapshot())

        if self.remaining_seconds == 0:
            self._complete()

    def _complete(self) -> None:
        self._stop_ticking()

        minutes = completed_minutes(self.total_seconds)
        event = SessionCompleted(duration=minutes, notes=self.notes, kind=self.kind)
        self.notes = ""

        if minutes > 0:
            logger.info("Completed %s session of %s minutes", event.kind, minutes)
            self._emit("session_complete", event)
        else:
            logger.debug("Run of %ss credits no minutes, not recorded", self.total_seconds)

        if self.auto_advance:
            self._load_kind(next_kind(event.kind))
            self._auto_start_handle = self.scheduler.schedule_once(
                self.config.auto_advance_delay_seconds, self._auto_start
            )
        self._emit_state_change()

    def _auto_start(self) -> None:
        self._auto_start_handle = None
        self.start()
