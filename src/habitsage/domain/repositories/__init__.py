"""Repository protocol definitions for domain layer."""

from .errors import HabitStoreError, QuoteStoreError, StoreError
from .habit import HabitRepository
from .quote import QuoteRepository

__all__ = [
    "HabitRepository",
    "HabitStoreError",
    "QuoteRepository",
    "QuoteStoreError",
    "StoreError",
]
