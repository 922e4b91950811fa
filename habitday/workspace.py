"""Workspace root, timezone, path helpers for HabitDay."""

from __future__ import annotations

import os
from datetime import datetime
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from habitday.fileio import read_yaml

HISTORY_FILE = "habit_history.json"
SETTINGS_FILE = "settings.yaml"


def workspace_root() -> Path:
    """Get the workspace root directory (holds the history blob and settings)."""
    return Path(
        os.environ.get("HABITDAY_ROOT", str(Path.home() / "habitday"))
    ).expanduser().resolve()


def get_user_timezone(root: Path | None = None) -> ZoneInfo:
    """Get user's timezone from settings.yaml, defaulting to UTC."""
    if root is None:
        root = workspace_root()
    settings = read_yaml(settings_path(root))
    name = settings.get("timezone")
    if name:
        try:
            return ZoneInfo(str(name))
        except (ZoneInfoNotFoundError, ValueError):
            pass
    return ZoneInfo("UTC")


def today_str(root: Path | None = None) -> str:
    """Get today's date string (YYYY-MM-DD) in user's timezone."""
    tz = get_user_timezone(root)
    return datetime.now(tz).date().isoformat()


# ── Path helpers ──────────────────────────────────────────────

def history_path(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / HISTORY_FILE


def corrupt_history_path(root: Path | None = None) -> Path:
    return history_path(root).with_name(HISTORY_FILE + ".corrupt")


def settings_path(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / SETTINGS_FILE


def log_path(name: str, root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / name
