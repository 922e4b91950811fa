"""Day State Store: the persisted date -> snapshot mapping.

The whole history is one JSON blob (``habit_history.json``). Every commit
rewrites the full blob; there is no per-day file and no schema version.
"""

from __future__ import annotations

import copy
import logging
import os
from pathlib import Path
from typing import Any

from habitday.errors import CorruptHistoryError, PersistenceError
from habitday.fileio import read_json, write_json_atomic
from habitday.models import DaySnapshot, HabitRecord, HistoryStore
from habitday.template import default_snapshot
from habitday.workspace import corrupt_history_path, history_path, workspace_root

logger = logging.getLogger(__name__)


def _check_habit(path: Path, day: str, section: str, habit: Any) -> None:
    where = f"habit in {section!r} on {day!r}"
    if not isinstance(habit, dict):
        raise CorruptHistoryError(path, f"{where} is not an object")
    habit_id = habit.get("id")
    if isinstance(habit_id, bool) or not isinstance(habit_id, int):
        raise CorruptHistoryError(path, f"{where} has a non-integer id {habit_id!r}")
    if not isinstance(habit.get("title"), str):
        raise CorruptHistoryError(path, f"{where} has a non-string title")
    if not isinstance(habit.get("done"), bool):
        raise CorruptHistoryError(path, f"{where} has a non-boolean done flag")


def _check_entry(path: Path, day: str, entry: Any) -> None:
    """Reject anything ``from_dict`` would drop or coerce."""
    if not isinstance(entry, dict):
        raise CorruptHistoryError(path, f"entry for {day!r} is not an object")
    notes = entry.get("notes")
    if notes is not None and not isinstance(notes, str):
        raise CorruptHistoryError(path, f"notes for {day!r} are not a string")
    sections = entry.get("sections")
    if sections is not None and not isinstance(sections, dict):
        raise CorruptHistoryError(path, f"sections for {day!r} is not an object")
    for name, habits in (sections or {}).items():
        if not isinstance(habits, list):
            raise CorruptHistoryError(path, f"section {name!r} on {day!r} is not a list")
        for habit in habits:
            _check_habit(path, day, name, habit)


def load_history(root: Path | None = None) -> HistoryStore:
    """Load the history blob.

    A missing or empty file is an empty history. Anything present but
    undecodable raises ``CorruptHistoryError``.
    """
    if root is None:
        root = workspace_root()
    path = history_path(root)
    try:
        data = read_json(path)
    except ValueError as e:
        raise CorruptHistoryError(path, str(e)) from e

    for day, entry in data.items():
        _check_entry(path, day, entry)
    try:
        history = HistoryStore.from_dict(data)
    except (TypeError, ValueError, AttributeError) as e:
        raise CorruptHistoryError(path, str(e)) from e

    logger.debug("Loaded %d day(s) from %s", len(history), path)
    return history


def open_history(root: Path | None = None) -> tuple[HistoryStore, CorruptHistoryError | None]:
    """Load the history, recovering from a corrupt blob.

    On corruption the bad file is moved aside to ``*.corrupt`` so that the
    next commit cannot overwrite it, and an empty history is returned along
    with the error for the caller to surface.
    """
    if root is None:
        root = workspace_root()
    try:
        return load_history(root), None
    except CorruptHistoryError as e:
        logger.error("%s; starting with an empty history", e)
        aside = corrupt_history_path(root)
        try:
            os.replace(e.path, aside)
            logger.error("Corrupt history kept at %s", aside)
        except OSError as move_err:
            logger.error("Could not move corrupt history aside: %s", move_err)
        return HistoryStore(), e


def save_history(history: HistoryStore, root: Path | None = None) -> None:
    """Write the full history atomically. Raises ``PersistenceError``."""
    if root is None:
        root = workspace_root()
    path = history_path(root)
    try:
        write_json_atomic(path, history.to_dict())
    except OSError as e:
        logger.error("Failed to save history to %s: %s", path, e)
        raise PersistenceError(path, history, str(e)) from e


def snapshot_for(history: HistoryStore, day: str) -> DaySnapshot:
    """The stored snapshot for ``day`` or a fresh copy of the default template."""
    snap = history.days.get(day)
    if snap is None:
        return default_snapshot()
    return snap


def commit(
    history: HistoryStore,
    day: str,
    sections: dict[str, list[HabitRecord]],
    notes: str,
    root: Path | None = None,
) -> HistoryStore:
    """Return a new history with ``day`` replaced, and persist it.

    ``history`` itself is left untouched. If the write fails the new
    history is attached to the raised ``PersistenceError``.
    """
    days = dict(history.days)
    days[day] = DaySnapshot(sections=copy.deepcopy(sections), notes=notes)
    updated = HistoryStore(days=days)
    save_history(updated, root)
    logger.debug("Committed %s (%d day(s) total)", day, len(updated))
    return updated
