"""Habit and section mutations over a single day's snapshot.

Every function is pure: it returns a new ``DaySnapshot`` and leaves its
argument untouched. Blank names, unknown sections and unknown ids are
no-ops, not errors; the result then equals the input. Persisting the
result is the caller's job (``store.commit``).
"""

from __future__ import annotations

import copy
from dataclasses import replace

from habitday.models import DaySnapshot, HabitRecord


def _clone(snapshot: DaySnapshot) -> DaySnapshot:
    return copy.deepcopy(snapshot)


def next_habit_id(snapshot: DaySnapshot) -> int:
    """Next free id: one past the largest id in this snapshot, or 1.

    Only the given snapshot is consulted, so two dates can hand out the
    same id. Ids are never compared across dates.
    """
    return max((h.id for h in snapshot.habits()), default=0) + 1


def toggle(snapshot: DaySnapshot, section: str, habit_id: int) -> DaySnapshot:
    """Flip ``done`` on one habit."""
    new = _clone(snapshot)
    habits = new.sections.get(section)
    if habits is None:
        return new
    new.sections[section] = [
        replace(h, done=not h.done) if h.id == habit_id else h for h in habits
    ]
    return new


def add_habit(snapshot: DaySnapshot, section: str, title: str) -> DaySnapshot:
    """Append a habit with a freshly allocated id; blank titles are ignored."""
    new = _clone(snapshot)
    title = (title or "").strip()
    if not title or section not in new.sections:
        return new
    habit = HabitRecord(id=next_habit_id(new), title=title, done=False)
    new.sections[section] = [*new.sections[section], habit]
    return new


def delete_habit(snapshot: DaySnapshot, section: str, habit_id: int) -> DaySnapshot:
    new = _clone(snapshot)
    habits = new.sections.get(section)
    if habits is None:
        return new
    new.sections[section] = [h for h in habits if h.id != habit_id]
    return new


def rename_habit(snapshot: DaySnapshot, section: str, habit_id: int, title: str) -> DaySnapshot:
    """Replace a habit's title as typed (inline edit; no blank check)."""
    new = _clone(snapshot)
    habits = new.sections.get(section)
    if habits is None:
        return new
    new.sections[section] = [
        replace(h, title=title) if h.id == habit_id else h for h in habits
    ]
    return new


def rename_section(snapshot: DaySnapshot, old_name: str, new_name: str) -> DaySnapshot:
    """Move a section's habits under ``new_name``.

    The renamed section goes to the end of the order, unless ``new_name``
    already names another section: that section keeps its place and its
    habits are replaced.
    """
    new = _clone(snapshot)
    if not (new_name or "").strip() or old_name == new_name or old_name not in new.sections:
        return new
    habits = new.sections.pop(old_name)
    new.sections[new_name] = habits
    return new


def delete_section(snapshot: DaySnapshot, section: str) -> DaySnapshot:
    """Drop a section and all of its habits.

    Destructive: callers confirm with the user before calling this.
    """
    new = _clone(snapshot)
    new.sections.pop(section, None)
    return new


def add_section(snapshot: DaySnapshot, name: str) -> DaySnapshot:
    """Create an empty section. An existing section of that name is emptied."""
    new = _clone(snapshot)
    if not (name or "").strip():
        return new
    new.sections[name] = []
    return new


def reset_day(snapshot: DaySnapshot) -> DaySnapshot:
    """Uncheck every habit and clear the notes. Structure is unchanged."""
    return DaySnapshot(
        sections={
            name: [replace(h, done=False) for h in habits]
            for name, habits in snapshot.sections.items()
        },
        notes="",
    )


def set_notes(snapshot: DaySnapshot, notes: str) -> DaySnapshot:
    new = _clone(snapshot)
    new.notes = notes
    return new
