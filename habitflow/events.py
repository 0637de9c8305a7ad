"""Notification events and the event bus for HabitFlow.

Core components emit event values at key transitions; front ends
subscribe and decide how to show them (toasts, banners, logs).

Event kinds:
- habit_added, habit_deleted
- streak_milestone
- timer_started, timer_completed
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from typing import Any, Callable, ClassVar, Union

from habitflow.models import MILESTONE_STREAK


logger = logging.getLogger(__name__)

HISTORY_LIMIT = 100


@dataclass(frozen=True)
class HabitAdded:
    name: str

    kind: ClassVar[str] = "habit_added"
    title: ClassVar[str] = "✅ Habit added!"

    @property
    def description(self) -> str:
        return self.name


@dataclass(frozen=True)
class HabitDeleted:
    kind: ClassVar[str] = "habit_deleted"
    title: ClassVar[str] = "🗑️ Habit removed"
    description: ClassVar[str] = ""


@dataclass(frozen=True)
class StreakMilestone:
    value: int = MILESTONE_STREAK

    kind: ClassVar[str] = "streak_milestone"
    title: ClassVar[str] = "🔥 Streak milestone!"

    @property
    def description(self) -> str:
        return f"{self.value} days in a row. Keep it going!"


@dataclass(frozen=True)
class TimerStarted:
    kind: ClassVar[str] = "timer_started"
    title: ClassVar[str] = "⏰ Focus session started!"
    description: ClassVar[str] = "25 minutes of concentration"


@dataclass(frozen=True)
class TimerCompleted:
    kind: ClassVar[str] = "timer_completed"
    title: ClassVar[str] = "🎉 Focus session complete!"
    description: ClassVar[str] = "Great work!"


Event = Union[HabitAdded, HabitDeleted, StreakMilestone, TimerStarted, TimerCompleted]
Listener = Callable[[Event], None]


def event_to_dict(event: Event) -> dict[str, Any]:
    d: dict[str, Any] = {
        "kind": event.kind,
        "title": event.title,
        "description": event.description,
    }
    if isinstance(event, HabitAdded):
        d["name"] = event.name
    elif isinstance(event, StreakMilestone):
        d["value"] = event.value
    return d


class EventBus:
    """Fan-out of events to subscribed listeners, in subscription order.

    Delivery is fire-and-forget: a failing listener is logged and the
    remaining listeners still receive the event.
    """

    def __init__(self, history_limit: int = HISTORY_LIMIT) -> None:
        self._listeners: list[Listener] = []
        self._history: deque[Event] = deque(maxlen=history_limit)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register *listener*; returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def emit(self, event: Event) -> None:
        self._history.append(event)
        logger.debug("event %s", event.kind)
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception("Listener %r failed on %s", listener, event.kind)

    @property
    def history(self) -> list[Event]:
        return list(self._history)

    def recent(self, n: int = 10) -> list[Event]:
        """Most recent *n* events, newest first."""
        if n <= 0:
            return []
        return list(self._history)[-n:][::-1]
