"""The user's authored quotes, with visible notices for store failures."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Literal, Optional

from ..domain.repositories.errors import QuoteStoreError
from ..domain.repositories.quote import QuoteRepository
from ..logging_config import get_logger
from .quotes import DEFAULT_QUOTE_CATEGORY, PLACEHOLDER_AUTHOR, AuthoredQuote

logger = get_logger("services.quote_book")


@dataclass(frozen=True)
class Notice:
    """A short, non-blocking message for the user."""

    title: str
    description: str
    variant: Literal["default", "destructive"] = "default"


Notifier = Callable[[Notice], None]


def _discard(_notice: Notice) -> None:
    return None


def _same_id(left: int | str | None, right: int | str | None) -> bool:
    # Stores hand back ints or uuid strings; callers such as the CLI pass strings.
    return left is not None and right is not None and str(left) == str(right)


class QuoteBook:
    """Keeps the last-known list of authored quotes and forwards edits to the store.

    No change is applied locally unless the store accepted it.
    """

    def __init__(self, repo: QuoteRepository, *, user_id: str, notify: Optional[Notifier] = None):
        self.repo = repo
        self.user_id = user_id
        self.notify = notify or _discard
        self.quotes: list[AuthoredQuote] = []
        self.loaded = False

    def load(self) -> list[AuthoredQuote]:
        """Fetch active quotes; on failure keep the last-known list."""
        try:
            self.quotes = self.repo.list_active(user_id=self.user_id)
        except QuoteStoreError as exc:
            logger.error("Error fetching custom quotes", exc_info=True)
            self.notify(Notice("Couldn't load your quotes", str(exc), "destructive"))
        else:
            self.loaded = True
        return list(self.quotes)

    def create(
        self, text: str, author: str | None = None, category: str | None = None
    ) -> Optional[AuthoredQuote]:
        """Save a new quote; returns None when the store rejects it."""
        text = (text or "").strip()
        if not text:
            raise ValueError("Quote text cannot be empty")
        author = (author or "").strip() or PLACEHOLDER_AUTHOR
        category = category or DEFAULT_QUOTE_CATEGORY

        try:
            quote = self.repo.create(text, author, category, user_id=self.user_id)
        except QuoteStoreError as exc:
            logger.warning("Error creating quote: %s", exc)
            self.notify(Notice("Error creating quote", str(exc), "destructive"))
            return None

        self.quotes.insert(0, quote)
        self.notify(Notice("Quote created!", "Your personal quote has been added successfully."))
        return quote

    def update(self, quote_id: int | str, **changes: Any) -> Optional[AuthoredQuote]:
        """Edit a quote in place once the store confirms the change."""
        try:
            updated = self.repo.update(quote_id, user_id=self.user_id, **changes)
        except QuoteStoreError as exc:
            logger.warning("Error updating quote %s: %s", quote_id, exc)
            self.notify(Notice("Error updating quote", str(exc), "destructive"))
            return None

        self.quotes = [updated if _same_id(q.id, updated.id) else q for q in self.quotes]
        self.notify(Notice("Quote updated!", "Your quote has been updated successfully."))
        return updated

    def remove(self, quote_id: int | str) -> bool:
        """Soft-delete a quote; returns False when the store failed."""
        try:
            self.repo.deactivate(quote_id, user_id=self.user_id)
        except QuoteStoreError as exc:
            logger.warning("Error deleting quote %s: %s", quote_id, exc)
            self.notify(Notice("Error deleting quote", str(exc), "destructive"))
            return False

        self.quotes = [q for q in self.quotes if not _same_id(q.id, quote_id)]
        self.notify(Notice("Quote deleted", "Your quote has been removed."))
        return True


__all__ = ["Notice", "Notifier", "QuoteBook"]
