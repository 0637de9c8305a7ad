"""Shared test fixtures for HabitFlow tests."""

from __future__ import annotations

import os

import pytest

from habitflow.events import EventBus
from habitflow.habits import HabitStore
from habitflow.models import seed_habits
from habitflow.scheduling import ManualScheduler
from habitflow.timer import FocusTimer
from habitflow.tracker import HabitTracker


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep HABITFLOW_* settings from the developer's shell out of tests."""
    for key in list(os.environ):
        if key.startswith("HABITFLOW_"):
            monkeypatch.delenv(key)


@pytest.fixture
def bus() -> EventBus:
    return EventBus()


@pytest.fixture
def events(bus: EventBus) -> list:
    """Every event emitted on the bus, in order."""
    received: list = []
    bus.subscribe(received.append)
    return received


@pytest.fixture
def store(bus: EventBus) -> HabitStore:
    """Store seeded with the three example habits."""
    return HabitStore(bus, seed_habits())


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def timer(bus: EventBus, scheduler: ManualScheduler) -> FocusTimer:
    return FocusTimer(bus, scheduler)


@pytest.fixture
def tracker(bus: EventBus, scheduler: ManualScheduler):
    t = HabitTracker(scheduler=scheduler, bus=bus)
    yield t
    t.close()
