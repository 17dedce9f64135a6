"""SQLModel table exports."""

from .habit import Habit, HabitEntry
from .quote import CustomQuote

__all__ = [
    "CustomQuote",
    "Habit",
    "HabitEntry",
]
