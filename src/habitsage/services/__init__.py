"""Service module exports."""

from . import habits, quotes, rotation, quote_book

__all__ = [
    "habits",
    "quotes",
    "rotation",
    "quote_book",
]
