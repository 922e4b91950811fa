"""Built-in starter sections used for any date without a snapshot."""

from __future__ import annotations

import copy

from habitday.models import DaySnapshot, HabitRecord

DEFAULT_SECTIONS: dict[str, list[HabitRecord]] = {
    "Утренний блок": [
        HabitRecord(id=1, title="Вода + 10 отжиманий"),
        HabitRecord(id=2, title="Медитация 10 мин"),
        HabitRecord(id=3, title="Английский 10 мин"),
    ],
    "Развитие бизнеса": [
        HabitRecord(id=4, title="1 час на развитие бизнеса"),
    ],
    "Тренировка": [
        HabitRecord(id=5, title="Тренировка"),
    ],
    "Без сериалов/фильмов": [
        HabitRecord(id=6, title="Без сериалов/фильмов"),
    ],
}


def default_snapshot() -> DaySnapshot:
    """A fresh deep copy of the default template with empty notes."""
    return DaySnapshot(sections=copy.deepcopy(DEFAULT_SECTIONS), notes="")
