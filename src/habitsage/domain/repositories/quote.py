"""Authored-quote repository protocol."""

from __future__ import annotations

from typing import Any, Protocol

from ...services.quotes import AuthoredQuote


class QuoteRepository(Protocol):
    """Stores the quotes a user writes."""

    def list_active(self, *, user_id: str) -> list[AuthoredQuote]:
        """List active quotes, newest first."""
        ...

    def create(
        self, text: str, author: str | None, category: str, *, user_id: str
    ) -> AuthoredQuote:
        """Persist a new quote and return it."""
        ...

    def update(self, quote_id: int | str, *, user_id: str, **changes: Any) -> AuthoredQuote:
        """Change text, author or category of a quote."""
        ...

    def deactivate(self, quote_id: int | str, *, user_id: str) -> None:
        """Soft-delete a quote."""
        ...
