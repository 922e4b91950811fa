"""settings.yaml model for HabitDay.

Example::

    timezone: Europe/Moscow
    log_level: DEBUG
    log_file: habitday.log
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from habitday.fileio import read_yaml
from habitday.workspace import settings_path, workspace_root

VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass
class Settings:
    timezone: str = "UTC"
    log_level: str = "INFO"
    log_file: str = "habitday.log"  # relative to the workspace root; "" disables

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Settings:
        if not d or not isinstance(d, dict):
            return cls()
        level = str(d.get("log_level", "INFO") or "INFO").upper()
        if level not in VALID_LOG_LEVELS:
            level = "INFO"
        log_file = d.get("log_file", "habitday.log")
        return cls(
            timezone=str(d.get("timezone", "UTC") or "UTC"),
            log_level=level,
            log_file="" if log_file is None else str(log_file),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "timezone": self.timezone,
            "log_level": self.log_level,
            "log_file": self.log_file,
        }


def load_settings(root: Path | None = None) -> Settings:
    """Load settings.yaml from the workspace, defaults when absent."""
    if root is None:
        root = workspace_root()
    return Settings.from_dict(read_yaml(settings_path(root)))
