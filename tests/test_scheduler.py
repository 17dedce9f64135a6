"""Tests for the event-loop scheduler wrapper."""

from __future__ import annotations

import asyncio
import threading
from types import SimpleNamespace

import pytest

from habitsage.scheduler import QuoteScheduler, create_scheduler, delay_trigger
from habitsage.services.rotation import ROTATION_JOB_ID, TRANSITION_JOB_ID, QuoteRotator


def test_unknown_trigger_rejected():
    with pytest.raises(ValueError):
        QuoteScheduler().add_job(lambda: None, "cron", job_id="x", hour=3)


def test_add_job_before_start_raises():
    scheduler = create_scheduler()

    with pytest.raises(RuntimeError, match="scheduler not started"):
        scheduler.add_job(lambda: None, "interval", job_id="early", seconds=1)
    assert scheduler.running is False


def test_rotator_state_untouched_when_scheduler_not_started():
    scheduler = create_scheduler()
    rotator = QuoteRotator(scheduler)
    rotator.sync([SimpleNamespace(completed_today=True, current_streak=2, longest_streak=3)], [])
    shown = rotator.current

    with pytest.raises(RuntimeError):
        rotator.refresh()
    with pytest.raises(RuntimeError):
        rotator.activate()

    assert rotator.is_transitioning is False
    assert rotator.active is False
    assert rotator.current is shown

    async def scenario():
        scheduler.start()
        try:
            rotator.activate()
            assert rotator.active is True
            assert scheduler.scheduler.get_job(ROTATION_JOB_ID) is not None
        finally:
            rotator.deactivate()
            scheduler.stop()

    asyncio.run(scenario())


def test_coroutine_jobs_are_scheduled_as_is():
    async def job():
        return None

    async def scenario():
        scheduler = create_scheduler(auto_start=True)
        try:
            scheduler.add_job(job, "interval", job_id="async-job", seconds=60)
            assert scheduler.scheduler.get_job("async-job").func is job
        finally:
            scheduler.stop()

    asyncio.run(scenario())


def test_remove_unknown_job_is_ignored():
    async def scenario():
        scheduler = create_scheduler(auto_start=True)
        try:
            scheduler.remove_job("missing")
        finally:
            scheduler.stop()

    asyncio.run(scenario())


def test_delay_trigger_is_in_the_future():
    from datetime import datetime

    assert delay_trigger(5)["run_date"] > datetime.now()


def test_rotation_runs_on_event_loop_thread():
    main_thread = threading.get_ident()
    seen_threads = []
    quotes = []

    def on_change(quote):
        seen_threads.append(threading.get_ident())
        quotes.append(quote)

    async def scenario():
        scheduler = create_scheduler(auto_start=True)
        rotator = QuoteRotator(scheduler, interval=0.05, transition_delay=0.01, on_change=on_change)
        rotator.sync([SimpleNamespace(completed_today=False, current_streak=0, longest_streak=0)], [])
        rotator.activate()
        try:
            await asyncio.sleep(0.5)
        finally:
            rotator.deactivate()
            assert scheduler.scheduler.get_job(ROTATION_JOB_ID) is None
            assert scheduler.scheduler.get_job(TRANSITION_JOB_ID) is None
            scheduler.stop()

    asyncio.run(scenario())

    assert len(quotes) >= 2
    assert set(seen_threads) == {main_thread}
