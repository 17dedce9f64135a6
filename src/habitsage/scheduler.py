"""Event-loop task scheduler for quote rotation."""

from __future__ import annotations

import functools
import inspect
import logging
from datetime import datetime, timedelta
from typing import Any, Callable, Protocol

from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.date import DateTrigger
from apscheduler.triggers.interval import IntervalTrigger

logger = logging.getLogger("habitsage.scheduler")


class JobScheduler(Protocol):
    """The slice of the scheduler API that components depend on."""

    def add_job(
        self,
        func: Callable[[], Any],
        trigger: str,
        *,
        job_id: str,
        name: str | None = None,
        **trigger_args: Any,
    ) -> None:  # pragma: no cover - interface
        ...

    def remove_job(self, job_id: str) -> None:  # pragma: no cover - interface
        ...


def delay_trigger(seconds: float) -> dict[str, datetime]:
    """Return ``date`` trigger arguments firing ``seconds`` from now."""

    return {"run_date": datetime.now() + timedelta(seconds=seconds)}


def _on_loop(func: Callable[[], Any]) -> Callable[[], Any]:
    """Wrap a plain callable as a coroutine so it runs on the event loop thread.

    APScheduler's asyncio executor hands plain functions to a thread pool.
    Coroutine functions already run on the loop and are returned unchanged.
    """

    if inspect.iscoroutinefunction(func):
        return func

    @functools.wraps(func)
    async def runner() -> Any:
        return func()

    return runner


class QuoteScheduler:
    """Runs interval and one-shot jobs on the running asyncio event loop."""

    def __init__(self) -> None:
        self.scheduler: AsyncIOScheduler | None = None

    @property
    def running(self) -> bool:
        return self.scheduler is not None

    def start(self) -> None:
        """Start the scheduler; must be called from inside a running event loop."""
        if self.scheduler is not None:
            logger.warning("Scheduler already running")
            return

        self.scheduler = AsyncIOScheduler()
        self.scheduler.start()
        logger.info("Quote scheduler started")

    def stop(self) -> None:
        """Stop the scheduler, dropping any pending jobs."""
        if self.scheduler is not None:
            self.scheduler.shutdown(wait=False)
            self.scheduler = None
            logger.info("Quote scheduler stopped")

    def add_job(
        self,
        func: Callable[[], Any],
        trigger: str,
        *,
        job_id: str,
        name: str | None = None,
        **trigger_args: Any,
    ) -> None:
        """Add or replace a job.

        Args:
            func: Callable to execute on the event loop
            trigger: Trigger type ('interval' or 'date')
            job_id: Unique job identifier; an existing job with this id is replaced
            name: Human-readable job name
            **trigger_args: Arguments for the trigger (``seconds``, ``run_date``)

        Raises:
            ValueError: Unknown trigger type
            RuntimeError: The scheduler has not been started
        """
        if trigger == "interval":
            trigger_obj = IntervalTrigger(**trigger_args)
        elif trigger == "date":
            trigger_obj = DateTrigger(**trigger_args)
        else:
            raise ValueError(f"Unknown trigger type: {trigger}")

        if self.scheduler is None:
            raise RuntimeError(f"Cannot add job {job_id}: scheduler not started")

        self.scheduler.add_job(
            func=_on_loop(func),
            trigger=trigger_obj,
            id=job_id,
            name=name or job_id,
            replace_existing=True,
        )
        logger.debug(f"Added job: {job_id}")

    def remove_job(self, job_id: str) -> None:
        """Remove a job; ids that already fired or never existed are ignored.

        Args:
            job_id: Job identifier to remove
        """
        if self.scheduler is None:
            return
        try:
            self.scheduler.remove_job(job_id)
        except JobLookupError:
            logger.debug(f"Job {job_id} already gone")
            return
        logger.debug(f"Removed job: {job_id}")


def create_scheduler(*, auto_start: bool = False) -> QuoteScheduler:
    """Create and optionally start a scheduler.

    Args:
        auto_start: Whether to start the scheduler immediately (needs a running loop)

    Returns:
        QuoteScheduler instance
    """
    scheduler = QuoteScheduler()
    if auto_start:
        scheduler.start()
    return scheduler
