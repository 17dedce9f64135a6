"""Concrete repository implementations."""

from .habit import SQLModelHabitRepository
from .quote import SQLModelQuoteRepository
from .supabase import SupabaseHabitRepository, SupabaseQuoteRepository

__all__ = [
    "SQLModelHabitRepository",
    "SQLModelQuoteRepository",
    "SupabaseHabitRepository",
    "SupabaseQuoteRepository",
]
