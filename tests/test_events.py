"""Tests for habitflow/events.py — event values and the bus."""

import logging

from habitflow.events import (
    EventBus,
    HabitAdded,
    HabitDeleted,
    StreakMilestone,
    TimerCompleted,
    TimerStarted,
    event_to_dict,
)


def test_event_kinds():
    assert HabitAdded("Walk").kind == "habit_added"
    assert HabitDeleted().kind == "habit_deleted"
    assert StreakMilestone().kind == "streak_milestone"
    assert TimerStarted().kind == "timer_started"
    assert TimerCompleted().kind == "timer_completed"


def test_milestone_default_value():
    assert StreakMilestone().value == 7


def test_events_compare_by_value():
    assert HabitAdded("Walk") == HabitAdded("Walk")
    assert TimerCompleted() == TimerCompleted()


def test_event_to_dict():
    d = event_to_dict(HabitAdded(" Walk "))
    assert d["kind"] == "habit_added"
    assert d["name"] == " Walk "
    assert d["description"] == " Walk "
    assert event_to_dict(StreakMilestone())["value"] == 7
    assert "name" not in event_to_dict(TimerStarted())


def test_bus_delivers_in_subscription_order():
    bus = EventBus()
    calls = []
    bus.subscribe(lambda e: calls.append(("a", e.kind)))
    bus.subscribe(lambda e: calls.append(("b", e.kind)))
    bus.emit(TimerStarted())
    assert calls == [("a", "timer_started"), ("b", "timer_started")]


def test_bus_unsubscribe():
    bus = EventBus()
    calls = []
    unsubscribe = bus.subscribe(calls.append)
    unsubscribe()
    unsubscribe()
    bus.emit(HabitDeleted())
    assert calls == []


def test_failing_listener_does_not_block_others(caplog):
    bus = EventBus()
    calls = []

    def broken(event):
        raise RuntimeError("boom")

    bus.subscribe(broken)
    bus.subscribe(calls.append)
    with caplog.at_level(logging.ERROR, logger="habitflow.events"):
        bus.emit(TimerCompleted())
    assert calls == [TimerCompleted()]
    assert "failed" in caplog.text


def test_history_is_bounded():
    bus = EventBus(history_limit=3)
    for i in range(5):
        bus.emit(HabitAdded(str(i)))
    assert [e.name for e in bus.history] == ["2", "3", "4"]


def test_recent_newest_first():
    bus = EventBus()
    bus.emit(HabitAdded("a"))
    bus.emit(HabitDeleted())
    bus.emit(TimerStarted())
    assert [e.kind for e in bus.recent(2)] == ["timer_started", "habit_deleted"]
    assert bus.recent(0) == []
