"""HabitFlow core library: habit store, focus timer, events.

Public API re-exports for convenient imports:
    from habitflow import HabitTracker, HabitStore, FocusTimer, ...
"""

# Models
from habitflow.models import (
    MILESTONE_STREAK,
    SESSION_LENGTH,
    FocusSession,
    Habit,
    HabitView,
    ProgressView,
    TimerView,
    TrackerSnapshot,
    seed_habits,
)

# Events
from habitflow.events import (
    Event,
    EventBus,
    HabitAdded,
    HabitDeleted,
    StreakMilestone,
    TimerCompleted,
    TimerStarted,
    event_to_dict,
)

# Scheduling
from habitflow.scheduling import (
    AsyncioScheduler,
    ManualScheduler,
    TickHandle,
    TickScheduler,
)

# Components
from habitflow.habits import HabitStore
from habitflow.timer import FocusTimer, format_display
from habitflow.tracker import HabitTracker, streak_label

# Settings & logging
from habitflow.settings import Settings, load_settings
from habitflow.log import setup_logging
