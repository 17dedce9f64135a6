"""User-authored quotes."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel


class CustomQuote(SQLModel, table=True):
    """A quote written by the user; removal only clears ``is_active``."""

    __tablename__: ClassVar[str] = "custom_quote"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: str = Field(nullable=False, index=True, max_length=64)
    text: str = Field(nullable=False, max_length=500)
    author: Optional[str] = Field(default=None, max_length=120)
    category: str = Field(default="personal", nullable=False, max_length=32)
    is_active: bool = Field(default=True, nullable=False, index=True)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        nullable=False,
        index=True,
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
