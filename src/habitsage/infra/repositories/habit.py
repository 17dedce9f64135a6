"""SQLModel implementation of the habit repository."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Callable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from ...domain.repositories.errors import HabitStoreError
from ...models.habit import Habit, HabitEntry
from ...services.habits import HabitProgress, build_progress


class SQLModelHabitRepository:
    """SQLModel-based habit repository implementation."""

    def __init__(self, session_factory: Callable[[], Session]):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def _progress(self, session: Session, habit: Habit, today: date | None) -> HabitProgress:
        entries = session.exec(
            select(HabitEntry)
            .where(HabitEntry.user_id == habit.user_id)
            .where(HabitEntry.habit_id == habit.id)
        ).all()
        return build_progress(
            habit_id=habit.id,
            name=habit.name,
            target=habit.target,
            entries=entries,
            today=today,
        )

    def list_progress(self, *, user_id: str, today: date | None = None) -> list[HabitProgress]:
        """Return progress for every active habit, newest first."""
        try:
            with self.session_factory() as session:
                habits = session.exec(
                    select(Habit)
                    .where(Habit.user_id == user_id)
                    .where(Habit.is_active == True)  # noqa: E712
                    .order_by(Habit.created_at.desc(), Habit.id.desc())  # type: ignore[union-attr]
                ).all()
                return [self._progress(session, habit, today) for habit in habits]
        except SQLAlchemyError as exc:
            raise HabitStoreError(f"Failed to load habits: {exc}") from exc

    def get_by_name(self, name: str, *, user_id: str) -> Optional[HabitProgress]:
        """Retrieve an active habit's progress by name."""
        try:
            with self.session_factory() as session:
                habit = session.exec(
                    select(Habit)
                    .where(Habit.name == name.strip(), Habit.user_id == user_id)
                    .where(Habit.is_active == True)  # noqa: E712
                ).first()
                if habit is None:
                    return None
                return self._progress(session, habit, None)
        except SQLAlchemyError as exc:
            raise HabitStoreError(f"Failed to load habit {name!r}: {exc}") from exc

    def create(
        self,
        name: str,
        *,
        user_id: str,
        target: int = 1,
        description: str = "",
        category: str | None = None,
    ) -> HabitProgress:
        """Create a new habit."""
        name = name.strip()
        if not name:
            raise ValueError("Habit name cannot be empty")
        if target < 1:
            raise ValueError("Habit target must be at least 1")

        habit = Habit(
            user_id=user_id,
            name=name,
            description=description,
            target=target,
            category=category,
        )
        try:
            with self.session_factory() as session:
                session.add(habit)
                session.commit()
                session.refresh(habit)
                return self._progress(session, habit, None)
        except SQLAlchemyError as exc:
            raise HabitStoreError(f"Failed to create habit {name!r}: {exc}") from exc

    def log_progress(
        self, habit_id: int | str, progress: int, *, user_id: str, on: date | None = None
    ) -> None:
        """Insert or update the progress for a habit on a day."""
        if progress < 0:
            raise ValueError("Progress cannot be negative")
        on = on or date.today()
        try:
            with self.session_factory() as session:
                existing = session.exec(
                    select(HabitEntry)
                    .where(HabitEntry.user_id == user_id)
                    .where(HabitEntry.habit_id == int(habit_id))
                    .where(HabitEntry.occurred_on == on)
                ).first()

                if existing:
                    existing.progress = progress
                    session.add(existing)
                else:
                    session.add(
                        HabitEntry(
                            user_id=user_id,
                            habit_id=int(habit_id),
                            occurred_on=on,
                            progress=progress,
                        )
                    )
                session.commit()
        except SQLAlchemyError as exc:
            raise HabitStoreError(f"Failed to log progress: {exc}") from exc

    def deactivate(self, habit_id: int | str, *, user_id: str) -> None:
        """Hide a habit without deleting its history."""
        try:
            with self.session_factory() as session:
                habit = session.exec(
                    select(Habit).where(Habit.id == int(habit_id), Habit.user_id == user_id)
                ).first()
                if habit:
                    habit.is_active = False
                    habit.updated_at = datetime.now(timezone.utc)
                    session.add(habit)
                    session.commit()
        except SQLAlchemyError as exc:
            raise HabitStoreError(f"Failed to remove habit: {exc}") from exc
