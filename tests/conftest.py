"""Pytest configuration and shared fixtures for HabitSage tests.

Provides an isolated SQLite database per test, data factories, a scripted
random source and a fake scheduler so quote selection and rotation can be
driven deterministically.
"""

from __future__ import annotations

import tempfile
from datetime import date
from pathlib import Path
from typing import Any, Callable, Iterable

import pytest
from sqlmodel import Session, SQLModel, create_engine

from habitsage.infra.database import create_session_factory
from habitsage.models import CustomQuote, Habit, HabitEntry

USER_ID = "tester"


# =============================================================================
# Environment
# =============================================================================


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Point configuration at a temporary data dir and clear backend settings."""

    monkeypatch.setenv("HABITSAGE_DATA_DIR", str(tmp_path / "data"))
    for name in (
        "HABITSAGE_DATABASE_URL",
        "HABITSAGE_BACKEND",
        "HABITSAGE_DEV_MODE",
        "HABITSAGE_USER_ID",
        "HABITSAGE_QUOTE_INTERVAL",
        "HABITSAGE_QUOTE_TRANSITION",
        "SUPABASE_URL",
        "SUPABASE_KEY",
    ):
        monkeypatch.delenv(name, raising=False)


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(scope="function")
def db_engine():
    """Create an isolated SQLite database for each test.

    Yields:
        Engine: SQLModel engine connected to test database
    """
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    engine = create_engine(f"sqlite:///{db_path}", echo=False)
    SQLModel.metadata.create_all(engine)

    yield engine

    engine.dispose()
    db_path.unlink(missing_ok=True)


@pytest.fixture(scope="function")
def db_session(db_engine):
    """Create a database session for a single test."""
    session = Session(db_engine, expire_on_commit=False)
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


@pytest.fixture(scope="function")
def session_factory(db_engine):
    """Session factory matching what the repositories receive in the app."""
    return create_session_factory(db_engine)


# =============================================================================
# Test Data Factories
# =============================================================================


@pytest.fixture
def habit_factory(db_session):
    """Factory for creating test habits.

    Returns:
        Callable: Function that creates and persists Habit instances
    """

    def _create_habit(
        name: str = "Test Habit",
        target: int = 1,
        is_active: bool = True,
        user_id: str = USER_ID,
    ) -> Habit:
        habit = Habit(user_id=user_id, name=name, target=target, is_active=is_active)
        db_session.add(habit)
        db_session.commit()
        db_session.refresh(habit)
        return habit

    return _create_habit


@pytest.fixture
def entry_factory(db_session):
    """Factory for logging progress rows directly."""

    def _create_entries(habit: Habit, days: Iterable[date], progress: int = 1) -> None:
        for day in days:
            db_session.add(
                HabitEntry(
                    user_id=habit.user_id,
                    habit_id=habit.id,
                    occurred_on=day,
                    progress=progress,
                )
            )
        db_session.commit()

    return _create_entries


@pytest.fixture
def quote_factory(db_session):
    """Factory for creating stored authored quotes."""

    def _create_quote(
        text: str = "Keep going",
        author: str | None = None,
        category: str = "motivation",
        is_active: bool = True,
        user_id: str = USER_ID,
    ) -> CustomQuote:
        row = CustomQuote(
            user_id=user_id, text=text, author=author, category=category, is_active=is_active
        )
        db_session.add(row)
        db_session.commit()
        db_session.refresh(row)
        return row

    return _create_quote


# =============================================================================
# Deterministic collaborators
# =============================================================================


class ScriptedRandom:
    """Random source returning a fixed script of values."""

    def __init__(self, values: Iterable[float]):
        self.values = list(values)
        self.calls = 0

    def random(self) -> float:
        value = self.values[self.calls]
        self.calls += 1
        return value


class FakeScheduler:
    """Records jobs by id; tests fire them by hand."""

    def __init__(self) -> None:
        self.jobs: dict[str, dict[str, Any]] = {}
        self.removed: list[str] = []

    def add_job(self, func: Callable[[], Any], trigger: str, *, job_id: str, name=None, **trigger_args):
        self.jobs[job_id] = {"func": func, "trigger": trigger, "args": trigger_args}

    def remove_job(self, job_id: str) -> None:
        self.removed.append(job_id)
        self.jobs.pop(job_id, None)

    def fire(self, job_id: str) -> None:
        job = self.jobs[job_id]
        if job["trigger"] == "date":
            del self.jobs[job_id]
        job["func"]()


@pytest.fixture
def scripted_random():
    return ScriptedRandom


@pytest.fixture
def fake_scheduler():
    return FakeScheduler()
