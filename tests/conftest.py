"""Shared test fixtures for HabitDay tests."""

from __future__ import annotations

import json
import os
from pathlib import Path

import pytest
import yaml


def habit(id: int, title: str, done: bool = False) -> dict:
    return {"id": id, "title": title, "done": done}


SAMPLE_HISTORY = {
    "2024-01-01": {
        "sections": {"Morning": [habit(1, "Water", True), habit(2, "Stretch", False)]},
        "notes": "new year",
    },
    "2024-01-03": {
        "sections": {
            "Morning": [habit(1, "Water", True), habit(2, "Stretch", True)],
            "Evening": [habit(3, "Read", False)],
        },
        "notes": "",
    },
    "2024-01-02": {
        "sections": {"Morning": [habit(1, "Water", True), habit(2, "Stretch", True)]},
        "notes": "",
    },
    "2024-01-07": {
        "sections": {"Morning": []},
        "notes": "",
    },
}


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Create a temporary workspace with settings and a small history."""
    root = tmp_path / "workspace"
    root.mkdir(parents=True)

    settings = {"timezone": "UTC", "log_level": "DEBUG", "log_file": "logs/habitday.log"}
    (root / "settings.yaml").write_text(
        yaml.dump(settings, default_flow_style=False), encoding="utf-8"
    )

    (root / "habit_history.json").write_text(
        json.dumps(SAMPLE_HISTORY, indent=2, ensure_ascii=False), encoding="utf-8"
    )

    # Set env var
    os.environ["HABITDAY_ROOT"] = str(root)
    yield root
    # Cleanup
    if "HABITDAY_ROOT" in os.environ:
        del os.environ["HABITDAY_ROOT"]


@pytest.fixture
def empty_workspace(tmp_path: Path) -> Path:
    """A workspace with no history file yet."""
    root = tmp_path / "fresh"
    root.mkdir(parents=True)
    os.environ["HABITDAY_ROOT"] = str(root)
    yield root
    if "HABITDAY_ROOT" in os.environ:
        del os.environ["HABITDAY_ROOT"]
