"""Repositories backed by a hosted Supabase project.

Tables mirror the local schema: ``habits``, ``habit_completions`` (one row per
habit and ``completion_date``) and ``custom_quotes``.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any, Optional

import httpx
from postgrest.exceptions import APIError
from supabase import Client, create_client

from ...domain.repositories.errors import HabitStoreError, QuoteStoreError
from ...services.habits import HabitProgress, build_progress
from ...services.quotes import DEFAULT_QUOTE_CATEGORY, AuthoredQuote

_BACKEND_ERRORS = (APIError, httpx.HTTPError)
_EDITABLE_FIELDS = {"text", "author", "category"}


def connect(url: str, key: str) -> Client:
    """Create a Supabase client for the given project."""
    return create_client(url, key)


@dataclass(frozen=True)
class _Completion:
    occurred_on: date
    progress: int


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _to_authored(row: dict[str, Any]) -> AuthoredQuote:
    return AuthoredQuote(
        text=row["text"],
        author=row.get("author"),
        category=row.get("category") or DEFAULT_QUOTE_CATEGORY,
        id=row.get("id"),
    )


class SupabaseQuoteRepository:
    """Authored quotes stored in the ``custom_quotes`` table."""

    table = "custom_quotes"

    def __init__(self, client: Client):
        self.client = client

    def list_active(self, *, user_id: str) -> list[AuthoredQuote]:
        try:
            resp = (
                self.client.table(self.table)
                .select("*")
                .eq("user_id", user_id)
                .eq("is_active", True)
                .order("created_at", desc=True)
                .execute()
            )
        except _BACKEND_ERRORS as exc:
            raise QuoteStoreError(f"Failed to load quotes: {exc}") from exc
        return [_to_authored(row) for row in resp.data or []]

    def create(
        self, text: str, author: str | None, category: str, *, user_id: str
    ) -> AuthoredQuote:
        payload = {"user_id": user_id, "text": text, "author": author, "category": category}
        try:
            resp = self.client.table(self.table).insert(payload).execute()
        except _BACKEND_ERRORS as exc:
            raise QuoteStoreError(f"Failed to save quote: {exc}") from exc
        if not resp.data:
            raise QuoteStoreError("Quote insert returned no row")
        return _to_authored(resp.data[0])

    def update(self, quote_id: int | str, *, user_id: str, **changes: Any) -> AuthoredQuote:
        unknown = set(changes) - _EDITABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update quote fields: {', '.join(sorted(unknown))}")
        try:
            resp = (
                self.client.table(self.table)
                .update({**changes, "updated_at": _now_iso()})
                .eq("id", quote_id)
                .eq("user_id", user_id)
                .execute()
            )
        except _BACKEND_ERRORS as exc:
            raise QuoteStoreError(f"Failed to update quote: {exc}") from exc
        if not resp.data:
            raise QuoteStoreError(f"Quote {quote_id} not found")
        return _to_authored(resp.data[0])

    def deactivate(self, quote_id: int | str, *, user_id: str) -> None:
        try:
            resp = (
                self.client.table(self.table)
                .update({"is_active": False, "updated_at": _now_iso()})
                .eq("id", quote_id)
                .eq("user_id", user_id)
                .execute()
            )
        except _BACKEND_ERRORS as exc:
            raise QuoteStoreError(f"Failed to remove quote: {exc}") from exc
        if not resp.data:
            raise QuoteStoreError(f"Quote {quote_id} not found")


class SupabaseHabitRepository:
    """Habits in ``habits`` with daily progress rows in ``habit_completions``."""

    habits_table = "habits"
    completions_table = "habit_completions"

    def __init__(self, client: Client):
        self.client = client

    def _completions(self, *, user_id: str, habit_id: str | None = None) -> dict[str, list[_Completion]]:
        query = (
            self.client.table(self.completions_table)
            .select("habit_id, completion_date, progress")
            .eq("user_id", user_id)
        )
        if habit_id is not None:
            query = query.eq("habit_id", habit_id)
        by_habit: dict[str, list[_Completion]] = defaultdict(list)
        for row in query.execute().data or []:
            by_habit[str(row["habit_id"])].append(
                _Completion(
                    occurred_on=date.fromisoformat(row["completion_date"]),
                    progress=int(row.get("progress") or 0),
                )
            )
        return by_habit

    def _progress(self, row: dict[str, Any], entries: list[_Completion], today: date | None) -> HabitProgress:
        return build_progress(
            habit_id=row["id"],
            name=row["name"],
            target=int(row.get("target") or 1),
            entries=entries,
            today=today,
        )

    def list_progress(self, *, user_id: str, today: date | None = None) -> list[HabitProgress]:
        try:
            habits = (
                self.client.table(self.habits_table)
                .select("*")
                .eq("user_id", user_id)
                .eq("is_active", True)
                .order("created_at", desc=True)
                .execute()
            ).data or []
            completions = self._completions(user_id=user_id)
        except _BACKEND_ERRORS as exc:
            raise HabitStoreError(f"Failed to load habits: {exc}") from exc
        return [self._progress(row, completions.get(str(row["id"]), []), today) for row in habits]

    def get_by_name(self, name: str, *, user_id: str) -> Optional[HabitProgress]:
        try:
            rows = (
                self.client.table(self.habits_table)
                .select("*")
                .eq("user_id", user_id)
                .eq("is_active", True)
                .eq("name", name.strip())
                .limit(1)
                .execute()
            ).data or []
            if not rows:
                return None
            completions = self._completions(user_id=user_id, habit_id=rows[0]["id"])
        except _BACKEND_ERRORS as exc:
            raise HabitStoreError(f"Failed to load habit {name!r}: {exc}") from exc
        return self._progress(rows[0], completions.get(str(rows[0]["id"]), []), None)

    def create(
        self,
        name: str,
        *,
        user_id: str,
        target: int = 1,
        description: str = "",
        category: str | None = None,
    ) -> HabitProgress:
        name = name.strip()
        if not name:
            raise ValueError("Habit name cannot be empty")
        if target < 1:
            raise ValueError("Habit target must be at least 1")
        payload = {
            "user_id": user_id,
            "name": name,
            "description": description,
            "target": target,
            "category": category,
            "is_active": True,
        }
        try:
            resp = self.client.table(self.habits_table).insert(payload).execute()
        except _BACKEND_ERRORS as exc:
            raise HabitStoreError(f"Failed to create habit {name!r}: {exc}") from exc
        if not resp.data:
            raise HabitStoreError("Habit insert returned no row")
        return self._progress(resp.data[0], [], None)

    def log_progress(
        self, habit_id: int | str, progress: int, *, user_id: str, on: date | None = None
    ) -> None:
        if progress < 0:
            raise ValueError("Progress cannot be negative")
        payload = {
            "habit_id": habit_id,
            "user_id": user_id,
            "completion_date": (on or date.today()).isoformat(),
            "progress": progress,
            "notes": "",
        }
        try:
            (
                self.client.table(self.completions_table)
                .upsert(payload, on_conflict="habit_id,completion_date")
                .execute()
            )
        except _BACKEND_ERRORS as exc:
            raise HabitStoreError(f"Failed to log progress: {exc}") from exc

    def deactivate(self, habit_id: int | str, *, user_id: str) -> None:
        try:
            (
                self.client.table(self.habits_table)
                .update({"is_active": False})
                .eq("id", habit_id)
                .eq("user_id", user_id)
                .execute()
            )
        except _BACKEND_ERRORS as exc:
            raise HabitStoreError(f"Failed to remove habit: {exc}") from exc
