"""HabitTracker: the one state object a front end holds.

Wires the habit store, the focus timer and the event bus together,
accepts user intents, and produces a read-only snapshot for rendering.
"""

from __future__ import annotations

import logging
from typing import Callable

from habitflow.events import EventBus, Listener
from habitflow.habits import HabitStore
from habitflow.models import Habit, HabitView, TimerView, TrackerSnapshot, seed_habits
from habitflow.scheduling import ManualScheduler, TickScheduler
from habitflow.timer import FocusTimer


logger = logging.getLogger(__name__)


def streak_label(streak: int) -> str:
    """'1 day', '5 days'; empty for a zero streak (nothing is shown)."""
    if streak <= 0:
        return ""
    return f"{streak} day" if streak == 1 else f"{streak} days"


class HabitTracker:
    def __init__(
        self,
        scheduler: TickScheduler | None = None,
        bus: EventBus | None = None,
        seed: bool = True,
        tick_interval: float = 1.0,
    ) -> None:
        self.bus = bus if bus is not None else EventBus()
        self.store = HabitStore(self.bus, seed_habits() if seed else ())
        self.timer = FocusTimer(
            self.bus,
            scheduler if scheduler is not None else ManualScheduler(),
            tick_interval=tick_interval,
        )

    # ── Intents ───────────────────────────────────────────────

    def add_habit(self, name: str) -> Habit | None:
        return self.store.add(name)

    def toggle_habit(self, habit_id: str) -> Habit | None:
        return self.store.toggle(habit_id)

    def delete_habit(self, habit_id: str) -> bool:
        return self.store.delete(habit_id)

    def start_timer(self) -> None:
        self.timer.start()

    def stop_timer(self) -> None:
        self.timer.stop()

    # ── Observation ───────────────────────────────────────────

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        return self.bus.subscribe(listener)

    def snapshot(self) -> TrackerSnapshot:
        habits = [
            HabitView(
                id=h.id,
                name=h.name,
                completed=h.completed,
                streak=h.streak,
                streak_label=streak_label(h.streak),
            )
            for h in self.store
        ]
        return TrackerSnapshot(
            habits=habits,
            progress=self.store.progress(),
            timer=TimerView(
                remaining=self.timer.display,
                remaining_seconds=self.timer.remaining_seconds,
                running=self.timer.running,
            ),
        )

    def close(self) -> None:
        logger.info("Closing tracker")
        self.timer.close()
