"""SQLModel implementation of the authored-quote repository."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Callable

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from ...domain.repositories.errors import QuoteStoreError
from ...models.quote import CustomQuote
from ...services.quotes import AuthoredQuote

_EDITABLE_FIELDS = {"text", "author", "category"}


def _row_id(quote_id: int | str) -> int:
    try:
        return int(quote_id)
    except (TypeError, ValueError) as exc:
        raise QuoteStoreError(f"Quote {quote_id} not found") from exc


def _to_authored(row: CustomQuote) -> AuthoredQuote:
    return AuthoredQuote(text=row.text, author=row.author, category=row.category, id=row.id)


class SQLModelQuoteRepository:
    """SQLModel-based authored-quote repository implementation."""

    def __init__(self, session_factory: Callable[[], Session]):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def list_active(self, *, user_id: str) -> list[AuthoredQuote]:
        """List active quotes, newest first."""
        try:
            with self.session_factory() as session:
                rows = session.exec(
                    select(CustomQuote)
                    .where(CustomQuote.user_id == user_id)
                    .where(CustomQuote.is_active == True)  # noqa: E712
                    .order_by(CustomQuote.created_at.desc(), CustomQuote.id.desc())  # type: ignore[union-attr]
                ).all()
                return [_to_authored(row) for row in rows]
        except SQLAlchemyError as exc:
            raise QuoteStoreError(f"Failed to load quotes: {exc}") from exc

    def create(
        self, text: str, author: str | None, category: str, *, user_id: str
    ) -> AuthoredQuote:
        """Persist a new quote and return it."""
        row = CustomQuote(user_id=user_id, text=text, author=author, category=category)
        try:
            with self.session_factory() as session:
                session.add(row)
                session.commit()
                session.refresh(row)
                return _to_authored(row)
        except SQLAlchemyError as exc:
            raise QuoteStoreError(f"Failed to save quote: {exc}") from exc

    def update(self, quote_id: int | str, *, user_id: str, **changes: Any) -> AuthoredQuote:
        """Change text, author or category of a quote."""
        unknown = set(changes) - _EDITABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update quote fields: {', '.join(sorted(unknown))}")
        try:
            with self.session_factory() as session:
                row = session.exec(
                    select(CustomQuote).where(
                        CustomQuote.id == _row_id(quote_id), CustomQuote.user_id == user_id
                    )
                ).first()
                if row is None:
                    raise QuoteStoreError(f"Quote {quote_id} not found")
                for key, value in changes.items():
                    setattr(row, key, value)
                row.updated_at = datetime.now(timezone.utc)
                session.add(row)
                session.commit()
                session.refresh(row)
                return _to_authored(row)
        except SQLAlchemyError as exc:
            raise QuoteStoreError(f"Failed to update quote: {exc}") from exc

    def deactivate(self, quote_id: int | str, *, user_id: str) -> None:
        """Soft-delete a quote."""
        try:
            with self.session_factory() as session:
                row = session.exec(
                    select(CustomQuote).where(
                        CustomQuote.id == _row_id(quote_id), CustomQuote.user_id == user_id
                    )
                ).first()
                if row is None:
                    raise QuoteStoreError(f"Quote {quote_id} not found")
                row.is_active = False
                row.updated_at = datetime.now(timezone.utc)
                session.add(row)
                session.commit()
        except SQLAlchemyError as exc:
            raise QuoteStoreError(f"Failed to remove quote: {exc}") from exc
