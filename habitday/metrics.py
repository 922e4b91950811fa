"""Derived completion metrics. Read-only over snapshots and histories."""

from __future__ import annotations

import math

from habitday.models import DaySnapshot, HistoryStore


def percent(done: int, total: int) -> int:
    """Whole percent, halves rounded up; 0 when there is nothing to count."""
    if total <= 0:
        return 0
    return int(math.floor(100 * done / total + 0.5))


def day_progress(snapshot: DaySnapshot) -> int:
    """Share of done habits across all sections of one day, 0-100."""
    habits = snapshot.habits()
    return percent(sum(1 for h in habits if h.done), len(habits))


def filter_history(
    history: HistoryStore,
    start: str | None = None,
    end: str | None = None,
) -> list[tuple[str, DaySnapshot]]:
    """Entries with ``start <= date <= end``, ascending by date string.

    Missing or empty bounds are ignored. Comparison is lexicographic, which
    orders ``YYYY-MM-DD`` dates correctly and anything else arbitrarily.
    """
    out = []
    for day, snap in history.days.items():
        if start and day < start:
            continue
        if end and day > end:
            continue
        out.append((day, snap))
    out.sort(key=lambda e: e[0])
    return out


def history_series(filtered: list[tuple[str, DaySnapshot]]) -> tuple[list[str], list[int]]:
    """Chart input: date labels and the matching day percentages."""
    labels = [day for day, _ in filtered]
    values = [day_progress(snap) for _, snap in filtered]
    return labels, values


def progress_lines(filtered: list[tuple[str, DaySnapshot]]) -> list[str]:
    """One ``"<date>: <n>% done"`` line per entry."""
    return [f"{day}: {day_progress(snap)}% done" for day, snap in filtered]


def chart_ready(labels: list[str]) -> bool:
    """A trend line needs at least two points."""
    return len(labels) > 1
