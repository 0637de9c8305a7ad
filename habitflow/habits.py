"""Habit collection: add, toggle, delete, and derived progress."""

from __future__ import annotations

import logging
import secrets
from typing import Iterable, Iterator

from habitflow.events import EventBus, HabitAdded, HabitDeleted, StreakMilestone
from habitflow.models import MILESTONE_STREAK, Habit, ProgressView


logger = logging.getLogger(__name__)


class HabitStore:
    """Owns the ordered habit list. Every operation is total over its inputs."""

    def __init__(self, bus: EventBus, habits: Iterable[Habit] = ()) -> None:
        self._bus = bus
        self._habits: list[Habit] = []
        for habit in habits:
            if self.get(habit.id) is not None:
                raise ValueError(f"Duplicate habit id: {habit.id}")
            self._habits.append(habit)

    def __iter__(self) -> Iterator[Habit]:
        return iter(list(self._habits))

    def __len__(self) -> int:
        return len(self._habits)

    @property
    def habits(self) -> list[Habit]:
        return list(self._habits)

    def get(self, habit_id: str) -> Habit | None:
        for h in self._habits:
            if h.id == habit_id:
                return h
        return None

    def _new_id(self) -> str:
        while True:
            candidate = secrets.token_hex(4)
            if self.get(candidate) is None:
                return candidate

    # ── Operations ────────────────────────────────────────────

    def add(self, name: str) -> Habit | None:
        """Append a new habit. Blank names are ignored and return None."""
        trimmed = name.strip()
        if not trimmed:
            return None
        habit = Habit(id=self._new_id(), name=trimmed)
        self._habits.append(habit)
        logger.info("Added habit %s (%r)", habit.id, habit.name)
        self._bus.emit(HabitAdded(name=name))
        return habit

    def toggle(self, habit_id: str) -> Habit | None:
        """Flip completion and move the streak with it.

        Completing raises the streak by one; un-completing lowers it by
        one, floored at 0. Returns None when no habit has that id.
        """
        habit = self.get(habit_id)
        if habit is None:
            return None

        habit.completed = not habit.completed
        if habit.completed:
            habit.streak += 1
        else:
            habit.streak = max(0, habit.streak - 1)
        logger.info(
            "Toggled habit %s: completed=%s streak=%d",
            habit.id, habit.completed, habit.streak,
        )

        if habit.completed and habit.streak == MILESTONE_STREAK:
            self._bus.emit(StreakMilestone(value=habit.streak))
        return habit

    def delete(self, habit_id: str) -> bool:
        """Remove the habit with *habit_id*. Returns True if one was removed.

        The deleted notification goes out even when nothing matched.
        """
        removed = False
        for i, h in enumerate(self._habits):
            if h.id == habit_id:
                self._habits.pop(i)
                removed = True
                break
        if removed:
            logger.info("Deleted habit %s", habit_id)
        else:
            logger.debug("Delete for unknown habit %s", habit_id)
        self._bus.emit(HabitDeleted())
        return removed

    # ── Derived values ────────────────────────────────────────

    @property
    def completed_count(self) -> int:
        return sum(1 for h in self._habits if h.completed)

    @property
    def total_count(self) -> int:
        return len(self._habits)

    @property
    def progress_percentage(self) -> float:
        total = self.total_count
        if total == 0:
            return 0
        return self.completed_count / total * 100

    @property
    def all_done(self) -> bool:
        return self.total_count > 0 and self.progress_percentage == 100

    def progress(self) -> ProgressView:
        return ProgressView(
            completed_count=self.completed_count,
            total_count=self.total_count,
            progress_percentage=self.progress_percentage,
        )
