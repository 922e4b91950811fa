"""Typed dataclasses for the HabitDay data model.

All models use from_dict/to_dict for JSON serialization. The JSON layout is
the persisted history blob: ``{date: {"sections": {name: [habit, ...]},
"notes": str}}``. Unknown keys are ignored; missing keys use defaults.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


# ── Habits ────────────────────────────────────────────────────


@dataclass
class HabitRecord:
    """One checkable habit. Ids are unique within a day's snapshot."""

    id: int = 0
    title: str = ""
    done: bool = False

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> HabitRecord:
        return cls(
            id=int(d.get("id", 0)),
            title=str(d.get("title", "")),
            done=bool(d.get("done", False)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "title": self.title, "done": self.done}


# ── Day snapshot ──────────────────────────────────────────────


@dataclass
class DaySnapshot:
    """Sections and notes for one date. Section order is insertion order."""

    sections: dict[str, list[HabitRecord]] = field(default_factory=dict)
    notes: str = ""

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> DaySnapshot:
        if not d or not isinstance(d, dict):
            return cls()
        sections: dict[str, list[HabitRecord]] = {}
        for name, habits in (d.get("sections") or {}).items():
            sections[str(name)] = [
                HabitRecord.from_dict(h) for h in (habits or []) if isinstance(h, dict)
            ]
        return cls(sections=sections, notes=str(d.get("notes", "") or ""))

    def to_dict(self) -> dict[str, Any]:
        return {
            "sections": {
                name: [h.to_dict() for h in habits]
                for name, habits in self.sections.items()
            },
            "notes": self.notes,
        }

    def habits(self) -> list[HabitRecord]:
        """All habits across all sections, in display order."""
        return [h for habits in self.sections.values() for h in habits]

    def find(self, section: str, habit_id: int) -> HabitRecord | None:
        for h in self.sections.get(section, []):
            if h.id == habit_id:
                return h
        return None


# ── History ───────────────────────────────────────────────────


@dataclass
class HistoryStore:
    """Every visited date mapped to its snapshot.

    Dates are opaque strings; they are not validated as calendar dates.
    """

    days: dict[str, DaySnapshot] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> HistoryStore:
        if not d or not isinstance(d, dict):
            return cls()
        return cls(days={str(k): DaySnapshot.from_dict(v) for k, v in d.items()})

    def to_dict(self) -> dict[str, Any]:
        return {day: snap.to_dict() for day, snap in self.days.items()}

    def __contains__(self, day: object) -> bool:
        return day in self.days

    def __len__(self) -> int:
        return len(self.days)
