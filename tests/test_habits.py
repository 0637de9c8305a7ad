"""Tests for habitflow/habits.py — add, toggle, delete, derived counts."""

import pytest

from habitflow.events import EventBus, HabitAdded, HabitDeleted, StreakMilestone
from habitflow.habits import HabitStore
from habitflow.models import Habit


# ── add ───────────────────────────────────────────────────────


@pytest.mark.parametrize("name", ["Walk", "  Walk  ", "Read 10 pages", "x"])
def test_add_appends_fresh_habit(store, events, name):
    before = store.total_count
    habit = store.add(name)
    assert store.total_count == before + 1
    assert store.habits[-1] is habit
    assert habit.name == name.strip()
    assert habit.completed is False
    assert habit.streak == 0
    assert events == [HabitAdded(name=name)]


@pytest.mark.parametrize("name", ["", "   ", "\t\n"])
def test_add_blank_is_ignored(store, events, name):
    before = [h.to_dict() for h in store]
    assert store.add(name) is None
    assert [h.to_dict() for h in store] == before
    assert events == []


def test_add_generates_unique_ids(bus):
    store = HabitStore(bus)
    ids = {store.add(f"habit {i}").id for i in range(50)}
    assert len(ids) == 50


def test_add_regenerates_colliding_id(bus, monkeypatch):
    store = HabitStore(bus, [Habit(id="aaaa", name="Existing")])
    tokens = iter(["aaaa", "bbbb"])
    monkeypatch.setattr("habitflow.habits.secrets.token_hex", lambda n: next(tokens))
    assert store.add("New").id == "bbbb"


def test_duplicate_seed_ids_rejected(bus):
    with pytest.raises(ValueError, match="Duplicate"):
        HabitStore(bus, [Habit(id="1", name="A"), Habit(id="1", name="B")])


# ── toggle ────────────────────────────────────────────────────


@pytest.mark.parametrize("streak", [0, 1, 5, 10])
def test_toggle_on_increments_streak(bus, streak):
    store = HabitStore(bus, [Habit(id="h", name="H", completed=False, streak=streak)])
    habit = store.toggle("h")
    assert habit.completed is True
    assert habit.streak == streak + 1


@pytest.mark.parametrize("streak, expected", [(0, 0), (1, 0), (5, 4)])
def test_toggle_off_decrements_streak_floored(bus, streak, expected):
    store = HabitStore(bus, [Habit(id="h", name="H", completed=True, streak=streak)])
    habit = store.toggle("h")
    assert habit.completed is False
    assert habit.streak == expected


@pytest.mark.parametrize("streak", [0, 3, 6, 7])
def test_toggle_twice_round_trips(bus, streak):
    store = HabitStore(bus, [Habit(id="h", name="H", completed=False, streak=streak)])
    store.toggle("h")
    store.toggle("h")
    habit = store.get("h")
    assert habit.completed is False
    assert habit.streak == streak


def test_toggle_unknown_id_is_noop(store, events):
    before = [h.to_dict() for h in store]
    assert store.toggle("missing") is None
    assert [h.to_dict() for h in store] == before
    assert events == []


def test_toggle_leaves_other_habits_untouched(store):
    before = {h.id: h.to_dict() for h in store}
    store.toggle("1")
    assert store.get("2").to_dict() == before["2"]
    assert store.get("3").to_dict() == before["3"]


def test_milestone_fires_on_reaching_seven(bus, events):
    store = HabitStore(bus, [Habit(id="h", name="H", streak=6)])
    store.toggle("h")
    assert events == [StreakMilestone(value=7)]


def test_milestone_not_fired_for_other_values(bus, events):
    store = HabitStore(bus, [Habit(id="a", name="A", streak=5), Habit(id="b", name="B", streak=7)])
    store.toggle("a")
    store.toggle("b")
    assert events == []


def test_milestone_not_fired_when_dropping_to_seven(bus, events):
    store = HabitStore(bus, [Habit(id="h", name="H", completed=True, streak=8)])
    store.toggle("h")
    assert store.get("h").streak == 7
    assert events == []


def test_milestone_refires_after_down_then_up(bus, events):
    store = HabitStore(bus, [Habit(id="h", name="H", streak=6)])
    store.toggle("h")
    store.toggle("h")
    store.toggle("h")
    assert events == [StreakMilestone(), StreakMilestone()]


# ── delete ────────────────────────────────────────────────────


def test_delete_removes_one_and_keeps_order(store, events):
    assert store.delete("2") is True
    assert [h.id for h in store] == ["1", "3"]
    assert store.total_count == 2
    assert events == [HabitDeleted()]


def test_delete_unknown_id_still_notifies(store, events):
    assert store.delete("missing") is False
    assert store.total_count == 3
    assert events == [HabitDeleted()]


def test_delete_then_toggle_is_noop(store):
    store.delete("1")
    assert store.toggle("1") is None


# ── derived values ────────────────────────────────────────────


def test_counts_on_seed(store):
    assert store.completed_count == 1
    assert store.total_count == 3
    assert store.progress_percentage == pytest.approx(100 / 3)
    assert store.all_done is False


def test_progress_empty_collection():
    store = HabitStore(EventBus())
    assert store.total_count == 0
    assert store.progress_percentage == 0
    assert store.all_done is False


def test_progress_hundred_only_when_all_complete(store):
    store.toggle("1")
    assert store.progress_percentage != 100
    store.toggle("3")
    assert store.progress_percentage == 100
    assert store.all_done is True
    store.toggle("2")
    assert store.all_done is False


def test_progress_zero_when_none_completed(store):
    store.toggle("2")
    assert store.completed_count == 0
    assert store.progress_percentage == 0


def test_progress_view_matches_properties(store):
    view = store.progress()
    assert view.completed_count == store.completed_count
    assert view.total_count == store.total_count
    assert view.progress_percentage == store.progress_percentage


def test_derived_values_recomputed_after_mutation(store):
    assert store.total_count == 3
    store.add("Walk")
    assert store.total_count == 4
    store.delete("1")
    assert store.total_count == 3


def test_iteration_is_a_snapshot(store):
    for h in store:
        store.delete(h.id)
    assert len(store) == 0
