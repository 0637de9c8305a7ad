from __future__ import annotations

import logging
import secrets
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

import yaml
from fastapi import APIRouter, Body, Depends, FastAPI, Form, HTTPException, Request, status
from fastapi.responses import HTMLResponse, PlainTextResponse, RedirectResponse
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from habitflow import (
    AsyncioScheduler,
    HabitTracker,
    Settings,
    TrackerSnapshot,
    event_to_dict,
    load_settings,
    setup_logging,
)


logger = logging.getLogger("habitflow.web")

ASSET_V = "20261018-01"


# ── HTML helpers ──────────────────────────────────────────────

def _escape(s: str) -> str:
    return (
        s.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
    )


STYLE = """
body { font-family: system-ui, sans-serif; background: #f1f5f9; color: #1e293b; margin: 0; }
.container { max-width: 56rem; margin: 0 auto; padding: 1rem; }
header.top { text-align: center; margin-bottom: 2rem; }
.card { background: #fff; border-radius: 10px; padding: 1rem 1.25rem; margin-bottom: 1.25rem; box-shadow: 0 1px 3px rgba(0,0,0,.08); }
.grid { display: grid; grid-template-columns: 1fr 1fr; gap: 1.25rem; }
.habit { display: flex; align-items: center; justify-content: space-between; padding: .6rem .8rem; background: #f8fafc; border-radius: 8px; margin-bottom: .5rem; }
.habit.done .name { color: #047857; text-decoration: line-through; }
.streak { color: #ea580c; font-size: .85rem; }
.muted { color: #64748b; }
.small { font-size: .85rem; }
.inline { display: inline; }
.timer { font-family: ui-monospace, monospace; font-size: 2rem; font-weight: bold; color: #9333ea; text-align: center; }
.alldone { text-align: center; background: #ecfdf5; color: #047857; border-radius: 8px; padding: .75rem; }
progress { width: 100%; }
"""

TIMER_POLL = """<script>
setInterval(async () => {
  const resp = await fetch("/api/state");
  if (!resp.ok) return;
  const timer = (await resp.json()).timer;
  document.getElementById("timer").textContent = timer.remaining;
  if (!timer.running) location.reload();
}, 1000);
</script>"""


def _render_page(snapshot: TrackerSnapshot, notices: list[dict[str, Any]]) -> str:
    rows = []
    for h in snapshot.habits:
        streak = f'<div class="streak">\U0001f525 {_escape(h.streak_label)}</div>' if h.streak_label else ""
        mark = "☑" if h.completed else "☐"
        rows.append(
            f"""
            <div class="habit{' done' if h.completed else ''}">
              <div>
                <form class="inline" method="post" action="/habits/{_escape(h.id)}/toggle">
                  <button type="submit" title="{'Mark not done' if h.completed else 'Mark done'}">{mark}</button>
                </form>
                <span class="name">{_escape(h.name)}</span>
                {streak}
              </div>
              <form class="inline" method="post" action="/habits/{_escape(h.id)}/delete">
                <button type="submit" title="Delete habit">✕</button>
              </form>
            </div>
            """
        )

    progress = snapshot.progress
    timer = snapshot.timer
    if timer.running:
        timer_form = '<form method="post" action="/timer/stop"><button type="submit">■ Stop</button></form>'
    else:
        timer_form = '<form method="post" action="/timer/start"><button type="submit" title="Start a 25-minute focus session">▶ Start</button></form>'

    all_done = (
        "<div class=\"alldone\">\U0001f3c6 All habits done! \U0001f389</div>" if progress.all_done else ""
    )
    notice_items = "".join(
        f"<li><b>{_escape(n['title'])}</b> <span class=\"muted\">{_escape(n['description'])}</span></li>"
        for n in notices
    )

    return f"""<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8" />
  <meta name="viewport" content="width=device-width, initial-scale=1" />
  <title>HabitFlow</title>
  <style>{STYLE}</style>
</head>
<body>
  <div class="container">
    <header class="top">
      <h1>My habit journal</h1>
      <div class="muted">Keep track of yourself every day</div>
    </header>

    <section class="card">
      <h2>Add a habit</h2>
      <form method="post" action="/habits">
        <input name="name" placeholder="e.g. drink water, read, walk..." autofocus />
        <button type="submit" title="Add habit">+</button>
      </form>
    </section>

    <section class="card">
      <h2>My habits</h2>
      {''.join(rows) if rows else '<div class="muted" style="text-align:center">Add your first habit!</div>'}
    </section>

    <section class="grid">
      <div class="card">
        <h2>Statistics</h2>
        <div class="small">Done today <b>{progress.completed_count} / {progress.total_count}</b></div>
        <progress max="100" value="{progress.progress_percentage:.0f}"></progress>
        {all_done}
      </div>
      <div class="card">
        <h2>Focus session</h2>
        <div class="timer" id="timer">{_escape(timer.remaining)}</div>
        {timer_form}
      </div>
    </section>

    <section class="card">
      <h2>Notifications</h2>
      {f'<ul>{notice_items}</ul>' if notice_items else '<div class="muted small">(none yet)</div>'}
    </section>
    <footer class="muted small">v{ASSET_V} · In-memory only; everything resets when the server restarts.</footer>
  </div>
  {TIMER_POLL if timer.running else ''}
</body>
</html>"""


# ── App factory ───────────────────────────────────────────────

def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the web app; settings default to the environment, read at startup."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if app.state.settings is None:
            app.state.settings = load_settings()
        settings = app.state.settings
        app.state.tracker = HabitTracker(
            scheduler=AsyncioScheduler(),
            seed=settings.seed,
            tick_interval=settings.tick_interval,
        )
        logger.info("Tracker ready with %d habits", app.state.tracker.store.total_count)
        try:
            yield
        finally:
            app.state.tracker.close()

    app = FastAPI(title="HabitFlow", version="0.1.0", lifespan=lifespan)
    app.state.settings = settings
    app.include_router(router)
    return app


# ── Auth ──────────────────────────────────────────────────────

security = HTTPBasic(auto_error=False)


def get_current_user(
    request: Request,
    credentials: HTTPBasicCredentials | None = Depends(security),
) -> str:
    settings: Settings = request.app.state.settings
    if not settings.auth_enabled:
        return "guest"

    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Basic"},
        )

    correct_username = secrets.compare_digest(credentials.username.encode("utf-8"), settings.username.encode("utf-8"))
    correct_password = secrets.compare_digest(credentials.password.encode("utf-8"), settings.password.encode("utf-8"))

    if not (correct_username and correct_password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Basic"},
        )

    return credentials.username


def get_tracker(request: Request) -> HabitTracker:
    return request.app.state.tracker


# ── Endpoints ─────────────────────────────────────────────────

router = APIRouter()


@router.get("/healthz")
async def healthz() -> dict[str, str]:
    return {"ok": "true"}


@router.get("/", response_class=HTMLResponse)
async def index(
    tracker: HabitTracker = Depends(get_tracker),
    username: str = Depends(get_current_user),
) -> HTMLResponse:
    notices = [event_to_dict(e) for e in tracker.bus.recent(5)]
    return HTMLResponse(_render_page(tracker.snapshot(), notices))


# ── JSON API ──────────────────────────────────────────────

@router.get("/api/state")
async def api_state(
    tracker: HabitTracker = Depends(get_tracker),
    username: str = Depends(get_current_user),
) -> dict[str, Any]:
    """Full view snapshot."""
    return tracker.snapshot().to_dict()


@router.get("/raw/state")
async def raw_state(
    tracker: HabitTracker = Depends(get_tracker),
    username: str = Depends(get_current_user),
) -> PlainTextResponse:
    text = yaml.safe_dump(tracker.snapshot().to_dict(), sort_keys=False, allow_unicode=True)
    return PlainTextResponse(text, media_type="application/yaml")


@router.get("/api/events")
async def api_events(
    n: int = 10,
    tracker: HabitTracker = Depends(get_tracker),
    username: str = Depends(get_current_user),
) -> dict[str, Any]:
    """Most recent notifications, newest first."""
    events = [event_to_dict(e) for e in tracker.bus.recent(n)]
    return {"count": len(events), "events": events}


@router.post("/api/habits")
async def api_add_habit(
    payload: dict[str, Any] = Body(...),
    tracker: HabitTracker = Depends(get_tracker),
    username: str = Depends(get_current_user),
) -> dict[str, Any]:
    """Add a habit. A blank name is accepted and ignored."""
    name = payload.get("name")
    if not isinstance(name, str):
        raise HTTPException(status_code=400, detail="Missing name")
    habit = tracker.add_habit(name)
    return {"ok": True, "habit": habit.to_dict() if habit else None}


@router.post("/api/habits/{habit_id}/toggle")
async def api_toggle_habit(
    habit_id: str,
    tracker: HabitTracker = Depends(get_tracker),
    username: str = Depends(get_current_user),
) -> dict[str, Any]:
    habit = tracker.toggle_habit(habit_id)
    return {"ok": True, "habit": habit.to_dict() if habit else None}


@router.delete("/api/habits/{habit_id}")
async def api_delete_habit(
    habit_id: str,
    tracker: HabitTracker = Depends(get_tracker),
    username: str = Depends(get_current_user),
) -> dict[str, Any]:
    removed = tracker.delete_habit(habit_id)
    return {"ok": True, "removed": removed}


@router.post("/api/timer/start")
async def api_timer_start(
    tracker: HabitTracker = Depends(get_tracker),
    username: str = Depends(get_current_user),
) -> dict[str, Any]:
    tracker.start_timer()
    return tracker.snapshot().timer.to_dict()


@router.post("/api/timer/stop")
async def api_timer_stop(
    tracker: HabitTracker = Depends(get_tracker),
    username: str = Depends(get_current_user),
) -> dict[str, Any]:
    tracker.stop_timer()
    return tracker.snapshot().timer.to_dict()


# ── HTML form endpoints ───────────────────────────────────

@router.post("/habits")
async def form_add_habit(
    name: str = Form(""),
    tracker: HabitTracker = Depends(get_tracker),
    username: str = Depends(get_current_user),
) -> RedirectResponse:
    tracker.add_habit(name)
    return RedirectResponse(url="/", status_code=303)


@router.post("/habits/{habit_id}/toggle")
async def form_toggle_habit(
    habit_id: str,
    tracker: HabitTracker = Depends(get_tracker),
    username: str = Depends(get_current_user),
) -> RedirectResponse:
    tracker.toggle_habit(habit_id)
    return RedirectResponse(url="/", status_code=303)


@router.post("/habits/{habit_id}/delete")
async def form_delete_habit(
    habit_id: str,
    tracker: HabitTracker = Depends(get_tracker),
    username: str = Depends(get_current_user),
) -> RedirectResponse:
    tracker.delete_habit(habit_id)
    return RedirectResponse(url="/", status_code=303)


@router.post("/timer/start")
async def form_timer_start(
    tracker: HabitTracker = Depends(get_tracker),
    username: str = Depends(get_current_user),
) -> RedirectResponse:
    tracker.start_timer()
    return RedirectResponse(url="/", status_code=303)


@router.post("/timer/stop")
async def form_timer_stop(
    tracker: HabitTracker = Depends(get_tracker),
    username: str = Depends(get_current_user),
) -> RedirectResponse:
    tracker.stop_timer()
    return RedirectResponse(url="/", status_code=303)


app = create_app()


def main() -> None:
    import uvicorn

    settings = load_settings()
    setup_logging(settings.log_level)
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
