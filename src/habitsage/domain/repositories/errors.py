"""Errors raised by repository implementations."""

from __future__ import annotations


class StoreError(RuntimeError):
    """A backing store could not complete a read or write."""


class HabitStoreError(StoreError):
    """The habit store failed."""


class QuoteStoreError(StoreError):
    """The authored-quote store failed."""
