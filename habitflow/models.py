"""Typed dataclasses for the HabitFlow data model.

Habits and the focus session live in memory only. ``to_dict`` renders the
view state for the JSON API and the YAML snapshot, with camelCase keys.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


SESSION_LENGTH = 25 * 60
MILESTONE_STREAK = 7


# ── Habits ────────────────────────────────────────────────────


@dataclass
class Habit:
    """A named daily goal with a completion flag and a streak counter."""

    id: str = ""
    name: str = ""
    completed: bool = False
    streak: int = 0
    last_completed: str | None = None  # carried, not used by any logic yet

    def __post_init__(self) -> None:
        if self.streak < 0:
            self.streak = 0

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "completed": self.completed,
            "streak": self.streak,
        }
        if self.last_completed:
            d["lastCompleted"] = self.last_completed
        return d


SEED_HABITS: tuple[tuple[str, str, bool, int], ...] = (
    ("1", "Drink water", False, 3),
    ("2", "Read books", True, 7),
    ("3", "Meditate", False, 2),
)


def seed_habits() -> list[Habit]:
    """Fresh copies of the example habits shown on first start."""
    return [
        Habit(id=hid, name=name, completed=completed, streak=streak)
        for hid, name, completed, streak in SEED_HABITS
    ]


# ── Focus Session ─────────────────────────────────────────────


@dataclass
class FocusSession:
    remaining_seconds: int = SESSION_LENGTH
    running: bool = False


# ── View state ────────────────────────────────────────────────


@dataclass
class HabitView:
    id: str
    name: str
    completed: bool
    streak: int
    streak_label: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "completed": self.completed,
            "streak": self.streak,
            "streakLabel": self.streak_label,
        }


@dataclass
class ProgressView:
    completed_count: int = 0
    total_count: int = 0
    progress_percentage: float = 0.0

    @property
    def all_done(self) -> bool:
        return self.total_count > 0 and self.progress_percentage == 100

    def to_dict(self) -> dict[str, Any]:
        return {
            "completedCount": self.completed_count,
            "totalCount": self.total_count,
            "progressPercentage": self.progress_percentage,
            "allDone": self.all_done,
        }


@dataclass
class TimerView:
    remaining: str = "25:00"
    remaining_seconds: int = SESSION_LENGTH
    running: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "remaining": self.remaining,
            "remainingSeconds": self.remaining_seconds,
            "running": self.running,
        }


@dataclass
class TrackerSnapshot:
    """Everything a front end needs to render one frame."""

    habits: list[HabitView] = field(default_factory=list)
    progress: ProgressView = field(default_factory=ProgressView)
    timer: TimerView = field(default_factory=TimerView)

    def to_dict(self) -> dict[str, Any]:
        return {
            "habits": [h.to_dict() for h in self.habits],
            "progress": self.progress.to_dict(),
            "timer": self.timer.to_dict(),
        }
