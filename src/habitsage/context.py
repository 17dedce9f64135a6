"""Application context for dependency injection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional

from .config import BaseConfig
from .domain.repositories import HabitRepository, QuoteRepository
from .infra.database import bootstrap_database
from .infra.repositories import (
    SQLModelHabitRepository,
    SQLModelQuoteRepository,
    SupabaseHabitRepository,
    SupabaseQuoteRepository,
)
from .infra.repositories.supabase import connect
from .logging_config import get_logger

logger = get_logger("context")


@dataclass
class AppContext:
    """Configuration plus the repositories for the configured backend."""

    config: BaseConfig
    habit_repo: HabitRepository
    quote_repo: QuoteRepository
    user_id: str

    # Only set for the local SQLite backend
    session_factory: Optional[Callable[[], Any]] = None


def create_app_context(config: Optional[BaseConfig] = None) -> AppContext:
    """Create the application context for the configured backend."""

    if config is None:
        config = BaseConfig()

    if config.BACKEND == "supabase":
        client = connect(config.SUPABASE_URL, config.SUPABASE_KEY)
        logger.info("Using Supabase backend", extra={"url": config.SUPABASE_URL})
        return AppContext(
            config=config,
            habit_repo=SupabaseHabitRepository(client),
            quote_repo=SupabaseQuoteRepository(client),
            user_id=config.USER_ID,
        )

    _engine, session_factory = bootstrap_database(config)
    logger.info("Using SQLite backend", extra={"database_url": config.DATABASE_URL})
    return AppContext(
        config=config,
        habit_repo=SQLModelHabitRepository(session_factory),
        quote_repo=SQLModelQuoteRepository(session_factory),
        user_id=config.USER_ID,
        session_factory=session_factory,
    )
