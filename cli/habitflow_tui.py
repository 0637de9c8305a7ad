#!/usr/bin/env python3
"""HabitFlow TUI — interactive habit tracker powered by Textual."""

from __future__ import annotations

import logging
from typing import Callable

import yaml
from rich.markup import escape
from rich.text import Text
from textual import on
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.timer import Timer
from textual.widgets import (
    Button,
    Checkbox,
    Footer,
    Header,
    Input,
    Label,
    ProgressBar,
    Static,
)

from habitflow import (
    Event,
    HabitTracker,
    HabitView,
    Settings,
    load_settings,
    setup_logging,
)


logger = logging.getLogger("habitflow.tui")


# ── Tick source backed by Textual timers ───────────────────────


class TextualHandle:
    def __init__(self, timer: Timer) -> None:
        self._timer: Timer | None = timer

    @property
    def active(self) -> bool:
        return self._timer is not None

    def cancel(self) -> None:
        if self._timer is not None:
            self._timer.stop()
            self._timer = None


class TextualScheduler:
    """Runs ticks through ``App.set_interval`` and repaints after each one."""

    def __init__(self, app: App, after_tick: Callable[[], None] | None = None) -> None:
        self._app = app
        self._after_tick = after_tick

    def every(self, interval: float, callback: Callable[[], None]) -> TextualHandle:
        def fire() -> None:
            callback()
            if self._after_tick is not None:
                self._after_tick()

        return TextualHandle(self._app.set_interval(interval, fire))


# ── Stylesheet ─────────────────────────────────────────────────

CSS = """
Screen {
    background: $surface;
}

#main-layout {
    height: 1fr;
}

#habits-pane {
    width: 2fr;
    min-width: 30;
    border-right: tall $primary-background-darken-2;
    padding: 0 1;
}

#side-pane {
    width: 1fr;
    min-width: 26;
    padding: 0 1;
}

.section-title {
    text-style: bold;
    color: $text;
    margin: 1 0 0 0;
    padding: 0 1;
}

#add-row {
    height: auto;
}

#new-habit {
    width: 1fr;
}

#add-habit {
    min-width: 5;
    width: auto;
}

#habit-list {
    height: auto;
}

.habit-row {
    height: auto;
    padding: 0 0;
    margin: 0 0;
}

.habit-row Checkbox {
    width: 1fr;
    height: auto;
}

.habit-done Checkbox {
    text-style: strike;
    color: $success;
}

.streak {
    width: auto;
    min-width: 10;
    height: 3;
    content-align: left middle;
    color: $warning;
}

.delete-habit {
    min-width: 5;
    width: auto;
}

#empty-hint {
    color: $text-muted;
    padding: 1 1;
}

#progress-label {
    padding: 0 1;
}

#all-done {
    display: none;
    color: $success;
    text-style: bold;
    padding: 0 1;
}

#timer-display {
    text-style: bold;
    color: $accent;
    content-align: center middle;
    height: 3;
}

#timer-toggle {
    width: 100%;
}

#snapshot-pane {
    display: none;
    height: auto;
    padding: 0 1;
    border: tall $primary-background-darken-2;
}
"""


# ── Custom widgets ─────────────────────────────────────────────


class HabitItem(Horizontal):
    """A single habit row: checkbox + streak + delete button."""

    def __init__(self, view: HabitView, **kwargs) -> None:
        super().__init__(id=f"habit-{view.id}", **kwargs)
        self.habit_id = view.id
        self._habit_view = view

    def compose(self) -> ComposeResult:
        yield Checkbox(Text(self._habit_view.name), value=self._habit_view.completed, id=f"cb-{self.habit_id}")
        yield Static(self._streak_text(self._habit_view), classes="streak")
        yield Button("✕", id=f"del-{self.habit_id}", classes="delete-habit", variant="error")

    def on_mount(self) -> None:
        self.add_class("habit-row")
        self.set_class(self._habit_view.completed, "habit-done")

    @staticmethod
    def _streak_text(view: HabitView) -> str:
        return f"🔥 {view.streak_label}" if view.streak_label else ""

    def refresh_view(self, view: HabitView) -> None:
        self._habit_view = view
        self.set_class(view.completed, "habit-done")
        cb = self.query_one(Checkbox)
        if cb.value != view.completed:
            with cb.prevent(Checkbox.Changed):
                cb.value = view.completed
        self.query_one(".streak", Static).update(self._streak_text(view))


# ── Main app ───────────────────────────────────────────────────


class HabitFlowApp(App):
    """HabitFlow — daily habits and a focus timer."""

    TITLE = "HabitFlow"
    SUB_TITLE = "Keep track of yourself every day"
    CSS = CSS
    AUTO_FOCUS = None

    BINDINGS = [
        Binding("t", "toggle_timer", "Start/Stop"),
        Binding("y", "toggle_snapshot", "Snapshot"),
        Binding("escape", "blur_focus", "Back"),
        Binding("q", "quit_app", "Quit"),
    ]

    def __init__(self, tracker: HabitTracker | None = None, settings: Settings | None = None) -> None:
        super().__init__()
        self.app_settings = settings or Settings()
        if tracker is None:
            tracker = HabitTracker(
                scheduler=TextualScheduler(self, after_tick=self._refresh_timer),
                seed=self.app_settings.seed,
                tick_interval=self.app_settings.tick_interval,
            )
        self.tracker = tracker
        self._unsubscribe = self.tracker.subscribe(self._on_event)

    def compose(self) -> ComposeResult:
        yield Header()
        yield Horizontal(
            VerticalScroll(
                Label("Add a habit", classes="section-title"),
                Horizontal(
                    Input(placeholder="e.g. drink water, read, walk…", id="new-habit"),
                    Button("+", id="add-habit", variant="primary"),
                    id="add-row",
                ),
                Label("My habits", classes="section-title"),
                Vertical(id="habit-list"),
                Static("Add your first habit!", id="empty-hint"),
                id="habits-pane",
            ),
            Vertical(
                Label("Statistics", classes="section-title"),
                Static(id="progress-label"),
                ProgressBar(total=100, show_eta=False, id="progress-bar"),
                Static("🏆 All habits done! 🎉", id="all-done"),
                Label("Focus session", classes="section-title"),
                Static(id="timer-display"),
                Button("Start", id="timer-toggle", variant="success"),
                Static(id="snapshot-pane"),
                id="side-pane",
            ),
            id="main-layout",
        )
        yield Footer()

    def on_mount(self) -> None:
        self._refresh_all()

    def on_unmount(self) -> None:
        self._unsubscribe()
        self.tracker.close()
        logger.info("TUI closed")

    # ── Rendering ──────────────────────────────────────────────

    def _refresh_all(self) -> None:
        self._sync_habit_list()
        self._refresh_progress()
        self._refresh_timer()
        self._refresh_snapshot()

    def _sync_habit_list(self) -> None:
        """Bring the rows in line with the tracker, keeping row order."""
        snapshot = self.tracker.snapshot()
        habit_list = self.query_one("#habit-list", Vertical)
        rows = {row.habit_id: row for row in habit_list.query(HabitItem)}
        wanted = {h.id for h in snapshot.habits}

        for habit_id, row in rows.items():
            if habit_id not in wanted:
                row.remove()
        for view in snapshot.habits:
            row = rows.get(view.id)
            if row is None:
                habit_list.mount(HabitItem(view))
            else:
                row.refresh_view(view)

        self.query_one("#empty-hint", Static).display = not snapshot.habits

    def _refresh_progress(self) -> None:
        progress = self.tracker.snapshot().progress
        self.query_one("#progress-label", Static).update(
            f"Done today  {progress.completed_count} / {progress.total_count}"
        )
        self.query_one("#progress-bar", ProgressBar).update(progress=progress.progress_percentage)
        self.query_one("#all-done", Static).display = progress.all_done

    def _refresh_timer(self) -> None:
        timer = self.tracker.snapshot().timer
        self.query_one("#timer-display", Static).update(timer.remaining)
        button = self.query_one("#timer-toggle", Button)
        button.label = "Stop" if timer.running else "Start"
        button.variant = "default" if timer.running else "success"
        self._refresh_snapshot()

    def _refresh_snapshot(self) -> None:
        pane = self.query_one("#snapshot-pane", Static)
        if pane.display:
            pane.update(snapshot_yaml(self.tracker))

    def _on_event(self, event: Event) -> None:
        self.notify(escape(event.description or event.title), title=event.title)

    # ── Intents ────────────────────────────────────────────────

    def add_habit_from_input(self) -> None:
        field = self.query_one("#new-habit", Input)
        if self.tracker.add_habit(field.value) is not None:
            field.value = ""
            self._sync_habit_list()
            self._refresh_progress()
            self._refresh_snapshot()

    @on(Input.Submitted, "#new-habit")
    def _on_habit_submitted(self, event: Input.Submitted) -> None:
        self.add_habit_from_input()

    @on(Button.Pressed, "#add-habit")
    def _on_add_pressed(self, event: Button.Pressed) -> None:
        self.add_habit_from_input()

    @on(Checkbox.Changed)
    def _on_habit_toggled(self, event: Checkbox.Changed) -> None:
        habit_id = (event.checkbox.id or "").removeprefix("cb-")
        self.tracker.toggle_habit(habit_id)
        self._sync_habit_list()
        self._refresh_progress()
        self._refresh_snapshot()

    @on(Button.Pressed, ".delete-habit")
    def _on_delete_pressed(self, event: Button.Pressed) -> None:
        habit_id = (event.button.id or "").removeprefix("del-")
        self.tracker.delete_habit(habit_id)
        self._sync_habit_list()
        self._refresh_progress()
        self._refresh_snapshot()

    @on(Button.Pressed, "#timer-toggle")
    def _on_timer_pressed(self, event: Button.Pressed) -> None:
        self.action_toggle_timer()

    def action_toggle_timer(self) -> None:
        if self.tracker.timer.running:
            self.tracker.stop_timer()
        else:
            self.tracker.start_timer()
        self._refresh_timer()

    def action_toggle_snapshot(self) -> None:
        pane = self.query_one("#snapshot-pane", Static)
        pane.display = not pane.display
        self._refresh_snapshot()

    def action_blur_focus(self) -> None:
        self.set_focus(None)

    def action_quit_app(self) -> None:
        self.exit()


def snapshot_yaml(tracker: HabitTracker) -> str:
    return yaml.safe_dump(
        tracker.snapshot().to_dict(),
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=False,
    )


# ── Entry point ────────────────────────────────────────────────


def main() -> None:
    settings = load_settings()
    if settings.log_level in {"DEBUG", "INFO"}:
        setup_logging(settings.log_level)
    app = HabitFlowApp(settings=settings)
    try:
        app.run()
    finally:
        app.tracker.close()


if __name__ == "__main__":
    main()
