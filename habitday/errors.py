"""Exception taxonomy for HabitDay.

Validation problems (blank titles, self-renames) are not errors; the
mutation functions treat them as no-ops.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from habitday.models import HistoryStore


class HabitDayError(Exception):
    """Base class for HabitDay errors."""


class CorruptHistoryError(HabitDayError):
    """The persisted history blob exists but cannot be decoded."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Corrupt history at {path}: {reason}")
        self.path = path
        self.reason = reason


class PersistenceError(HabitDayError):
    """Writing the history blob failed.

    The in-memory store already holds the attempted change; it is kept on
    ``history`` so the caller can retry the write.
    """

    def __init__(self, path: Path, history: HistoryStore | None = None, reason: str = "") -> None:
        super().__init__(f"Could not save history to {path}: {reason}" if reason else f"Could not save history to {path}")
        self.path = path
        self.history = history
        self.reason = reason
