"""Command-line interface for HabitSage."""

from __future__ import annotations

import asyncio
import random
from datetime import datetime
from typing import Optional

import click

from .config import BaseConfig
from .context import AppContext, create_app_context
from .domain.repositories import StoreError
from .logging_config import get_logger, setup_logging
from .scheduler import create_scheduler
from .services.quote_book import Notice, QuoteBook
from .services.quotes import (
    DEFAULT_QUOTE_CATEGORY,
    QUOTE_CATEGORIES,
    CandidateQuote,
    HabitSnapshot,
    select_quote,
)
from .services.rotation import QuoteRotator

logger = get_logger("cli")

DATA_SYNC_JOB_ID = "quote-data-sync"


def _echo_notice(notice: Notice) -> None:
    if notice.variant == "destructive":
        click.secho(f"{notice.title} {notice.description}", fg="red", err=True)
    else:
        click.secho(f"{notice.title} {notice.description}", fg="green")


def _echo_quote(quote: Optional[CandidateQuote]) -> None:
    if quote is None:
        click.echo("No habits yet. Add one to start seeing quotes.")
        return
    badge = " [personal]" if quote.is_personalized else ""
    click.echo(f'"{quote.text}"\n  - {quote.author}{badge}')


def _book(app: AppContext) -> QuoteBook:
    book = QuoteBook(app.quote_repo, user_id=app.user_id, notify=_echo_notice)
    book.load()
    return book


@click.group()
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Track habits and read personalized quotes."""

    if ctx.obj is not None:
        return
    try:
        config = BaseConfig()
    except ValueError as exc:
        raise click.ClickException(str(exc)) from exc
    setup_logging(config)
    ctx.obj = create_app_context(config)


@cli.group()
def habits() -> None:
    """Create habits and log daily progress."""


@habits.command("add")
@click.argument("name")
@click.option("--target", type=click.IntRange(min=1), default=1, show_default=True)
@click.option("--description", default="")
@click.option("--category", default=None)
@click.pass_obj
def habits_add(app: AppContext, name: str, target: int, description: str, category: Optional[str]) -> None:
    """Create a habit with a daily target."""

    try:
        habit = app.habit_repo.create(
            name, user_id=app.user_id, target=target, description=description, category=category
        )
    except (StoreError, ValueError) as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(f"Habit {habit.name!r} created (target {habit.target}/day).")


@habits.command("log")
@click.argument("name")
@click.argument("progress", type=click.IntRange(min=0))
@click.option("--date", "on", type=click.DateTime(formats=["%Y-%m-%d"]), default=None)
@click.pass_obj
def habits_log(app: AppContext, name: str, progress: int, on: Optional[datetime]) -> None:
    """Record PROGRESS for habit NAME (today unless --date is given)."""

    try:
        habit = app.habit_repo.get_by_name(name, user_id=app.user_id)
        if habit is None:
            raise click.ClickException(f"No active habit named {name!r}.")
        app.habit_repo.log_progress(
            habit.habit_id, progress, user_id=app.user_id, on=on.date() if on else None
        )
    except StoreError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(f"Logged {progress} for {habit.name!r}.")


@habits.command("list")
@click.pass_obj
def habits_list(app: AppContext) -> None:
    """Show today's progress and streaks."""

    try:
        rows = app.habit_repo.list_progress(user_id=app.user_id)
    except StoreError as exc:
        raise click.ClickException(str(exc)) from exc
    if not rows:
        click.echo("No habits yet.")
        return
    for row in rows:
        mark = "x" if row.completed_today else " "
        click.echo(
            f"[{mark}] {row.name}: {row.completed}/{row.target} today, "
            f"streak {row.current_streak}, best {row.longest_streak}"
        )
    snapshot = HabitSnapshot.from_habits(rows)
    click.echo(
        f"{snapshot.completed_today}/{snapshot.total_habits} completed today, "
        f"{snapshot.total_streak} combined streak days, best streak {snapshot.longest_streak}."
    )


@habits.command("remove")
@click.argument("name")
@click.pass_obj
def habits_remove(app: AppContext, name: str) -> None:
    """Stop tracking habit NAME."""

    try:
        habit = app.habit_repo.get_by_name(name, user_id=app.user_id)
        if habit is None:
            raise click.ClickException(f"No active habit named {name!r}.")
        app.habit_repo.deactivate(habit.habit_id, user_id=app.user_id)
    except StoreError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(f"Habit {habit.name!r} removed.")


@cli.group()
def quotes() -> None:
    """Manage your own quotes."""


@quotes.command("add")
@click.argument("text")
@click.option("--author", default=None, help="Who said this? Defaults to 'You'.")
@click.option(
    "--category",
    type=click.Choice(QUOTE_CATEGORIES),
    default=DEFAULT_QUOTE_CATEGORY,
    show_default=True,
)
@click.pass_obj
def quotes_add(app: AppContext, text: str, author: Optional[str], category: str) -> None:
    """Add a personal quote."""

    book = QuoteBook(app.quote_repo, user_id=app.user_id, notify=_echo_notice)
    try:
        quote = book.create(text, author=author, category=category)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="TEXT") from exc
    if quote is None:
        raise SystemExit(1)


@quotes.command("list")
@click.pass_obj
def quotes_list(app: AppContext) -> None:
    """List your active quotes, newest first."""

    book = _book(app)
    if not book.quotes:
        click.echo("No quotes yet.")
        return
    for quote in book.quotes:
        click.echo(f"{quote.id}: \"{quote.text}\" - {quote.author or 'You'} ({quote.category})")


@quotes.command("remove")
@click.argument("quote_id")
@click.pass_obj
def quotes_remove(app: AppContext, quote_id: str) -> None:
    """Remove a quote by id."""

    book = QuoteBook(app.quote_repo, user_id=app.user_id, notify=_echo_notice)
    if not book.remove(quote_id):
        raise SystemExit(1)


@cli.command("quote")
@click.option("--seed", type=int, default=None, help="Seed for a repeatable pick.")
@click.pass_obj
def quote(app: AppContext, seed: Optional[int]) -> None:
    """Show one quote picked for you."""

    try:
        rows = app.habit_repo.list_progress(user_id=app.user_id)
    except StoreError as exc:
        raise click.ClickException(str(exc)) from exc
    if not rows:
        _echo_quote(None)
        return
    book = _book(app)
    rng = random.Random(seed) if seed is not None else None
    _echo_quote(select_quote(HabitSnapshot.from_habits(rows), book.quotes, rng))


async def _rotate(app: AppContext, *, duration: float, interval: float) -> None:
    book = QuoteBook(app.quote_repo, user_id=app.user_id, notify=_echo_notice)
    scheduler = create_scheduler(auto_start=True)
    rotator = QuoteRotator(
        scheduler,
        interval=interval,
        transition_delay=app.config.QUOTE_TRANSITION,
        on_change=_echo_quote,
    )

    def fetch() -> Optional[tuple[list, list]]:
        try:
            rows = app.habit_repo.list_progress(user_id=app.user_id)
        except StoreError:
            logger.warning("Habit reload failed; keeping the previous habits", exc_info=True)
            return None
        return rows, book.load()

    async def sync() -> None:
        # Store calls block, so they run off the loop; the rotator is only touched on it.
        fetched = await asyncio.to_thread(fetch)
        if fetched is not None:
            rotator.sync(*fetched)

    await sync()
    if rotator.current is None:
        _echo_quote(None)
    rotator.activate()
    scheduler.add_job(sync, "interval", job_id=DATA_SYNC_JOB_ID, seconds=interval)
    try:
        await asyncio.sleep(duration)
    finally:
        scheduler.remove_job(DATA_SYNC_JOB_ID)
        rotator.deactivate()
        scheduler.stop()


@cli.command("rotate")
@click.option("--duration", type=click.FloatRange(min=0), default=90.0, show_default=True,
              help="Seconds to keep rotating.")
@click.option("--interval", type=click.FloatRange(min=0, min_open=True), default=None,
              help="Seconds between quotes (defaults to HABITSAGE_QUOTE_INTERVAL).")
@click.pass_obj
def rotate(app: AppContext, duration: float, interval: Optional[float]) -> None:
    """Print a fresh quote every interval until the duration runs out."""

    asyncio.run(_rotate(app, duration=duration, interval=interval or app.config.QUOTE_INTERVAL))


def main() -> None:
    """Console script entrypoint."""
    cli(prog_name="habitsage")


if __name__ == "__main__":
    main()
