"""Habit repository protocol."""

from __future__ import annotations

from datetime import date
from typing import Optional, Protocol

from ...services.habits import HabitProgress


class HabitRepository(Protocol):
    """Supplies habit progress and records new habits and daily progress."""

    def list_progress(self, *, user_id: str, today: date | None = None) -> list[HabitProgress]:
        """Return progress for every active habit, newest first."""
        ...

    def get_by_name(self, name: str, *, user_id: str) -> Optional[HabitProgress]:
        """Retrieve an active habit's progress by name."""
        ...

    def create(
        self,
        name: str,
        *,
        user_id: str,
        target: int = 1,
        description: str = "",
        category: str | None = None,
    ) -> HabitProgress:
        """Create a new habit."""
        ...

    def log_progress(
        self, habit_id: int | str, progress: int, *, user_id: str, on: date | None = None
    ) -> None:
        """Insert or update the progress for a habit on a day."""
        ...

    def deactivate(self, habit_id: int | str, *, user_id: str) -> None:
        """Hide a habit without deleting its history."""
        ...
