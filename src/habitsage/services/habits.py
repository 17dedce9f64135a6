"""Habit progress helpers: streaks and per-habit progress views."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, Protocol


class ProgressEntry(Protocol):
    """Anything carrying a day and the progress logged on it."""

    occurred_on: date
    progress: int


@dataclass(frozen=True)
class HabitProgress:
    """Read-only view of a habit and how it is going today."""

    habit_id: int | str
    name: str
    target: int
    completed: int
    completed_today: bool
    current_streak: int
    longest_streak: int


def compute_streaks(
    entries: Iterable[ProgressEntry], *, target: int = 1, today: date | None = None
) -> tuple[int, int]:
    """Return (current_streak, longest_streak) from a collection of entries.

    A day counts when its progress meets ``target``. The current streak may end
    yesterday so that a habit not yet done today keeps its streak alive.
    """

    today = today or date.today()
    threshold = max(target, 1)
    met_days = {e.occurred_on for e in entries if e.progress >= threshold}

    # Current streak: walk backwards from today (or yesterday) until a gap.
    current = 0
    cursor = today if today in met_days else today - timedelta(days=1)
    while cursor in met_days:
        current += 1
        cursor -= timedelta(days=1)

    # Longest streak: sweep through sorted days, counting consecutive runs.
    longest = 0
    run = 0
    last_day: date | None = None
    for d in sorted(met_days):
        if last_day is not None and d == last_day + timedelta(days=1):
            run += 1
        else:
            run = 1
        longest = max(longest, run)
        last_day = d

    return current, longest


def build_progress(
    *,
    habit_id: int | str,
    name: str,
    target: int,
    entries: Iterable[ProgressEntry],
    today: date | None = None,
) -> HabitProgress:
    """Combine a habit's entries into a HabitProgress for ``today``."""

    today = today or date.today()
    entries = list(entries)
    completed = sum(e.progress for e in entries if e.occurred_on == today)
    current, longest = compute_streaks(entries, target=target, today=today)
    return HabitProgress(
        habit_id=habit_id,
        name=name,
        target=target,
        completed=completed,
        completed_today=completed >= max(target, 1),
        current_streak=current,
        longest_streak=longest,
    )


__all__ = ["HabitProgress", "ProgressEntry", "build_progress", "compute_streaks"]
