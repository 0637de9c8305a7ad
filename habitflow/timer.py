"""Pomodoro-style focus timer for HabitFlow.

One fixed-length countdown (25 minutes). While running, a single tick
source advances it once per interval; stopping or completing always
resets to the full session length.
"""

from __future__ import annotations

import logging

from habitflow.events import EventBus, TimerCompleted, TimerStarted
from habitflow.models import SESSION_LENGTH, FocusSession
from habitflow.scheduling import TickHandle, TickScheduler


logger = logging.getLogger(__name__)


def format_display(seconds: int) -> str:
    """Render a second count as zero-padded ``MM:SS``."""
    if seconds < 0:
        raise ValueError(f"seconds must be non-negative, got {seconds}")
    mins, secs = divmod(int(seconds), 60)
    return f"{mins:02d}:{secs:02d}"


class FocusTimer:
    """Idle/Running state machine around a FocusSession.

    Invariant: a tick source exists exactly while the timer is running.
    """

    def __init__(
        self,
        bus: EventBus,
        scheduler: TickScheduler,
        tick_interval: float = 1.0,
    ) -> None:
        self._bus = bus
        self._scheduler = scheduler
        self._tick_interval = tick_interval
        self._session = FocusSession()
        self._handle: TickHandle | None = None
        self._closed = False

    @property
    def running(self) -> bool:
        return self._session.running

    @property
    def remaining_seconds(self) -> int:
        return self._session.remaining_seconds

    @property
    def display(self) -> str:
        return format_display(self._session.remaining_seconds)

    @property
    def session(self) -> FocusSession:
        return FocusSession(self._session.remaining_seconds, self._session.running)

    @property
    def has_active_tick_source(self) -> bool:
        return self._handle is not None and self._handle.active

    def start(self) -> None:
        """Enter Running. Resumes from the current count; never resets it."""
        if self._closed:
            raise RuntimeError("FocusTimer is closed")
        self._session.running = True
        if not self.has_active_tick_source:
            self._handle = self._scheduler.every(self._tick_interval, self.tick)
        logger.info("Focus timer started at %s", self.display)
        self._bus.emit(TimerStarted())

    def stop(self) -> None:
        """Hard reset to Idle with a full session on the clock."""
        self._cancel_ticks()
        self._session.running = False
        self._session.remaining_seconds = SESSION_LENGTH
        logger.info("Focus timer stopped")

    def tick(self) -> None:
        """Advance one second. The final second completes the session."""
        if not self._session.running:
            logger.debug("Ignoring tick while idle")
            return

        if self._session.remaining_seconds <= 1:
            self._cancel_ticks()
            self._session.running = False
            self._session.remaining_seconds = SESSION_LENGTH
            logger.info("Focus session completed")
            self._bus.emit(TimerCompleted())
            return

        self._session.remaining_seconds -= 1

    def close(self) -> None:
        """Tear down: cancel any tick source. Later ticks are ignored."""
        self._cancel_ticks()
        self._session.running = False
        self._closed = True

    def _cancel_ticks(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
