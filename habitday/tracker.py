"""HabitTracker: the explicitly owned state of one tracking session.

Holds the loaded history and the active date, runs the pure mutations on
the active snapshot, and commits each result. Both the TUI and the HTTP
service go through this class.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable

from habitday import metrics, mutations
from habitday.errors import CorruptHistoryError, PersistenceError
from habitday.models import DaySnapshot, HistoryStore
from habitday.store import commit, open_history, save_history, snapshot_for
from habitday.workspace import today_str, workspace_root

logger = logging.getLogger(__name__)


class HabitTracker:
    def __init__(
        self,
        history: HistoryStore,
        day: str,
        root: Path | None = None,
        load_error: CorruptHistoryError | None = None,
    ) -> None:
        self.root = root if root is not None else workspace_root()
        self.history = history
        self.day = day
        self.load_error = load_error
        self.snapshot = snapshot_for(history, day)

    @classmethod
    def open(cls, root: Path | None = None, day: str | None = None, persist: bool = True) -> HabitTracker:
        """Load the history and select ``day`` (today by default).

        With ``persist`` the selected day is written back right away, so an
        unvisited date lands in the history as the default template.
        """
        if root is None:
            root = workspace_root()
        history, error = open_history(root)
        tracker = cls(history, day or today_str(root), root=root, load_error=error)
        if persist:
            tracker.select_date(tracker.day)
        return tracker

    # ── Date selection ─────────────────────────────────────────

    def select_date(self, day: str, persist: bool = True) -> DaySnapshot:
        """Make ``day`` active and record its snapshot in the history.

        Without ``persist`` the history is only updated in memory.
        """
        self.day = day
        self.snapshot = snapshot_for(self.history, day)
        if persist:
            self._commit()
        else:
            self._stage_current()
        return self.snapshot

    # ── Mutations ──────────────────────────────────────────────

    def apply(self, mutation: Callable[..., DaySnapshot], *args) -> DaySnapshot:
        """Run a pure mutation on the active snapshot and commit the result.

        In-memory state is updated before the write; a failed write still
        raises ``PersistenceError`` with the new state kept.
        """
        self.snapshot = mutation(self.snapshot, *args)
        self._commit()
        return self.snapshot

    def toggle(self, section: str, habit_id: int) -> DaySnapshot:
        return self.apply(mutations.toggle, section, habit_id)

    def add_habit(self, section: str, title: str) -> DaySnapshot:
        return self.apply(mutations.add_habit, section, title)

    def delete_habit(self, section: str, habit_id: int) -> DaySnapshot:
        return self.apply(mutations.delete_habit, section, habit_id)

    def rename_habit(self, section: str, habit_id: int, title: str) -> DaySnapshot:
        return self.apply(mutations.rename_habit, section, habit_id, title)

    def rename_section(self, old_name: str, new_name: str) -> DaySnapshot:
        return self.apply(mutations.rename_section, old_name, new_name)

    def add_section(self, name: str) -> DaySnapshot:
        return self.apply(mutations.add_section, name)

    def delete_section(self, section: str, confirmed: bool = False) -> DaySnapshot:
        """Delete a section only once the user has confirmed it."""
        if not confirmed:
            return self.snapshot
        logger.info("Deleting section %r on %s", section, self.day)
        return self.apply(mutations.delete_section, section)

    def reset_day(self) -> DaySnapshot:
        return self.apply(mutations.reset_day)

    def set_notes(self, notes: str) -> DaySnapshot:
        return self.apply(mutations.set_notes, notes)

    # ── Persistence ────────────────────────────────────────────

    def stage(self, mutation: Callable[..., DaySnapshot], *args) -> HistoryStore:
        """Apply a mutation in memory only and return the history to save.

        For callers that write in the background; pass the result to
        ``store.save_history``.
        """
        self.snapshot = mutation(self.snapshot, *args)
        self._stage_current()
        return self.history

    def save(self) -> None:
        """Write the current history again, e.g. after a failed commit."""
        save_history(self.history, self.root)

    def _stage_current(self) -> None:
        days = dict(self.history.days)
        days[self.day] = self.snapshot
        self.history = HistoryStore(days=days)

    def _commit(self) -> None:
        try:
            self.history = commit(
                self.history, self.day, self.snapshot.sections, self.snapshot.notes, self.root
            )
        except PersistenceError as e:
            if e.history is not None:
                self.history = e.history
            raise
        self.snapshot = self.history.days[self.day]

    # ── Metrics ────────────────────────────────────────────────

    @property
    def progress(self) -> int:
        return metrics.day_progress(self.snapshot)

    def filtered(self, start: str | None = None, end: str | None = None) -> list[tuple[str, DaySnapshot]]:
        return metrics.filter_history(self.history, start, end)

    def series(self, start: str | None = None, end: str | None = None) -> tuple[list[str], list[int]]:
        return metrics.history_series(self.filtered(start, end))

    def progress_lines(self, start: str | None = None, end: str | None = None) -> list[str]:
        return metrics.progress_lines(self.filtered(start, end))
