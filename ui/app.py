from __future__ import annotations

import logging
import os
import secrets
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Callable

from fastapi import FastAPI, Depends, HTTPException, Query, status
from fastapi import Body
from fastapi.responses import HTMLResponse
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from habitday import (
    DaySnapshot,
    HabitTracker,
    PersistenceError,
    chart_ready,
    filter_history,
    history_series,
    open_history,
    progress_lines,
    load_settings,
    setup_logging,
    today_str as _today_str,
    workspace_root as _workspace_root,
)

logger = logging.getLogger("habitday.web")


# ── HTML helpers ──────────────────────────────────────────────

def _escape(s: str) -> str:
    return (
        s.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
    )


# ── App & auth ────────────────────────────────────────────────

@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    root = _workspace_root()
    setup_logging(load_settings(root), root, console=True)
    logger.info("Serving workspace %s", root)
    yield


app = FastAPI(title="HabitDay", version="0.1.0", lifespan=lifespan)

security = HTTPBasic(auto_error=False)


def get_current_user(credentials: HTTPBasicCredentials | None = Depends(security)) -> str:
    expected_username = os.environ.get("HABITDAY_USERNAME", "")
    expected_password = os.environ.get("HABITDAY_PASSWORD", "")

    if not expected_username or not expected_password:
        return "guest"

    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Basic"},
        )

    correct_username = secrets.compare_digest(credentials.username.encode("utf-8"), expected_username.encode("utf-8"))
    correct_password = secrets.compare_digest(credentials.password.encode("utf-8"), expected_password.encode("utf-8"))

    if not (correct_username and correct_password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Basic"},
        )

    return credentials.username


# ── Helpers ───────────────────────────────────────────────────

def _open(day: str) -> HabitTracker:
    """Load the history and visit ``day`` (written back like a first render)."""
    try:
        return HabitTracker.open(_workspace_root(), day)
    except PersistenceError as e:
        raise HTTPException(status_code=503, detail=str(e))


def _day_payload(tracker: HabitTracker) -> dict[str, Any]:
    out: dict[str, Any] = {
        "day": tracker.day,
        "progress": tracker.progress,
        **tracker.snapshot.to_dict(),
    }
    if tracker.load_error is not None:
        out["warning"] = str(tracker.load_error)
    return out


def _mutate(day: str, action: Callable[[HabitTracker], DaySnapshot]) -> dict[str, Any]:
    tracker = _open(day)
    try:
        action(tracker)
    except PersistenceError as e:
        raise HTTPException(status_code=503, detail=str(e))
    return _day_payload(tracker)


def _require_str(payload: dict[str, Any], key: str) -> str:
    value = payload.get(key)
    if not isinstance(value, str):
        raise HTTPException(status_code=400, detail=f"Missing {key}")
    return value


def _require_int(payload: dict[str, Any], key: str) -> int:
    value = payload.get(key)
    if isinstance(value, bool) or not isinstance(value, int):
        raise HTTPException(status_code=400, detail=f"Missing {key}")
    return value


# ── Endpoints ─────────────────────────────────────────────────

@app.get("/healthz")
def healthz() -> dict[str, str]:
    return {"ok": "true"}


@app.get("/", response_class=HTMLResponse)
def index(username: str = Depends(get_current_user)) -> HTMLResponse:
    tracker = _open(_today_str(_workspace_root()))

    blocks = []
    for name, habits in tracker.snapshot.sections.items():
        rows = "".join(
            f'<li>{"&#9745;" if h.done else "&#9744;"} {_escape(h.title)}</li>' for h in habits
        )
        blocks.append(f'<div class="card"><h3>{_escape(name)}</h3><ul>{rows or "<li class=muted>(empty)</li>"}</ul></div>')

    lines = tracker.progress_lines()
    history_txt = "\n".join(lines) if lines else "(no history yet)"
    warning = ""
    if tracker.load_error is not None:
        warning = f'<div class="warn"><b>&#9888; {_escape(str(tracker.load_error))}</b></div>'

    html = f"""<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8" />
  <meta name="viewport" content="width=device-width, initial-scale=1" />
  <title>HabitDay</title>
</head>
<body>
  <h1>HabitDay</h1>
  {warning}
  <p>{_escape(tracker.day)} &middot; Day progress: <b>{tracker.progress}%</b></p>
  {''.join(blocks)}
  <h2>What to improve tomorrow?</h2>
  <pre>{_escape(tracker.snapshot.notes or "(no notes)")}</pre>
  <h2>History</h2>
  <pre>{_escape(history_txt)}</pre>
</body>
</html>"""
    return HTMLResponse(html)


@app.get("/api/days/{day}")
def api_get_day(day: str, username: str = Depends(get_current_user)) -> dict[str, Any]:
    """Snapshot for a date; unvisited dates start from the default template."""
    return _day_payload(_open(day))


@app.post("/api/days/{day}/toggle")
def api_toggle(day: str, payload: dict[str, Any] = Body(...), username: str = Depends(get_current_user)) -> dict[str, Any]:
    section = _require_str(payload, "section")
    habit_id = _require_int(payload, "id")
    return _mutate(day, lambda t: t.toggle(section, habit_id))


@app.post("/api/days/{day}/habits")
def api_add_habit(day: str, payload: dict[str, Any] = Body(...), username: str = Depends(get_current_user)) -> dict[str, Any]:
    section = _require_str(payload, "section")
    title = _require_str(payload, "title")
    return _mutate(day, lambda t: t.add_habit(section, title))


@app.put("/api/days/{day}/habits/{habit_id}")
def api_rename_habit(day: str, habit_id: int, payload: dict[str, Any] = Body(...), username: str = Depends(get_current_user)) -> dict[str, Any]:
    section = _require_str(payload, "section")
    title = _require_str(payload, "title")
    return _mutate(day, lambda t: t.rename_habit(section, habit_id, title))


@app.delete("/api/days/{day}/habits/{habit_id}")
def api_delete_habit(day: str, habit_id: int, section: str = Query(...), username: str = Depends(get_current_user)) -> dict[str, Any]:
    return _mutate(day, lambda t: t.delete_habit(section, habit_id))


@app.post("/api/days/{day}/sections")
def api_add_section(day: str, payload: dict[str, Any] = Body(...), username: str = Depends(get_current_user)) -> dict[str, Any]:
    name = _require_str(payload, "name")
    return _mutate(day, lambda t: t.add_section(name))


@app.put("/api/days/{day}/sections/{name:path}")
def api_rename_section(day: str, name: str, payload: dict[str, Any] = Body(...), username: str = Depends(get_current_user)) -> dict[str, Any]:
    new_name = _require_str(payload, "name")
    return _mutate(day, lambda t: t.rename_section(name, new_name))


@app.delete("/api/days/{day}/sections/{name:path}")
def api_delete_section(day: str, name: str, confirm: bool = False, username: str = Depends(get_current_user)) -> dict[str, Any]:
    """Delete a section. Requires ``?confirm=true``; without it nothing changes."""
    if not confirm:
        raise HTTPException(status_code=409, detail=f"Deleting section {name!r} needs confirm=true")
    return _mutate(day, lambda t: t.delete_section(name, confirmed=True))


@app.put("/api/days/{day}/notes")
def api_set_notes(day: str, payload: dict[str, Any] = Body(...), username: str = Depends(get_current_user)) -> dict[str, Any]:
    notes = _require_str(payload, "notes")
    return _mutate(day, lambda t: t.set_notes(notes))


@app.post("/api/days/{day}/reset")
def api_reset_day(day: str, username: str = Depends(get_current_user)) -> dict[str, Any]:
    return _mutate(day, lambda t: t.reset_day())


@app.get("/api/history")
def api_history(
    start: str | None = None,
    end: str | None = None,
    username: str = Depends(get_current_user),
) -> dict[str, Any]:
    """Completion series for the chart display, oldest first, bounds inclusive."""
    history, error = open_history(_workspace_root())
    filtered = filter_history(history, start, end)
    labels, values = history_series(filtered)
    out: dict[str, Any] = {
        "labels": labels,
        "values": values,
        "lines": progress_lines(filtered),
        "chart": chart_ready(labels),
    }
    if error is not None:
        out["warning"] = str(error)
    return out
