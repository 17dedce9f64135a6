"""Quote rotation: keeps the displayed quote fresh.

The rotator owns the displayed quote and a cosmetic ``is_transitioning`` flag.
It reselects when the habit or authored-quote counts change, every
``interval`` seconds while active, and on explicit refresh. The recurring
rotation and the transition-clear are two separate scheduler jobs so that
deactivation can cancel each of them independently.
"""

from __future__ import annotations

from typing import Callable, Iterable, Optional, Sequence

from ..logging_config import get_logger
from ..scheduler import JobScheduler, delay_trigger
from .quotes import (
    AuthoredQuote,
    CandidateQuote,
    HabitRecord,
    HabitSnapshot,
    RandomSource,
    select_quote,
)

logger = get_logger("services.rotation")

ROTATION_JOB_ID = "quote-rotation"
TRANSITION_JOB_ID = "quote-transition-clear"


class QuoteRotator:
    """Holds the current quote and drives its re-selection."""

    def __init__(
        self,
        scheduler: JobScheduler,
        *,
        rng: RandomSource | None = None,
        interval: float = 30.0,
        transition_delay: float = 0.3,
        on_change: Optional[Callable[[Optional[CandidateQuote]], None]] = None,
    ) -> None:
        self.scheduler = scheduler
        self.rng = rng
        self.interval = interval
        self.transition_delay = transition_delay
        self.on_change = on_change

        self.current: Optional[CandidateQuote] = None
        self.is_transitioning = False
        self.active = False

        self._habits: tuple[HabitRecord, ...] = ()
        self._authored: tuple[AuthoredQuote, ...] = ()
        self._seen_counts: Optional[tuple[int, int]] = None
        self._transition_pending = False

    def sync(self, habits: Iterable[HabitRecord], authored: Sequence[AuthoredQuote]) -> None:
        """Take fresh copies of the collections and reselect if their sizes changed."""

        self._habits = tuple(habits)
        self._authored = tuple(authored)
        counts = (len(self._habits), len(self._authored))
        changed = counts != self._seen_counts
        self._seen_counts = counts

        if not self._habits:
            self._show(None)
            return
        if changed or self.current is None:
            self._show(self._select())

    def refresh(self) -> None:
        """Reselect with a fade transition; a no-op while there are no habits."""

        if not self._habits:
            return
        # Nothing changes unless the clear job was accepted.
        self.scheduler.add_job(
            self._clear_transition,
            "date",
            job_id=TRANSITION_JOB_ID,
            name="Quote transition clear",
            **delay_trigger(self.transition_delay),
        )
        self._transition_pending = True
        self.is_transitioning = True
        self._show(self._select())

    def activate(self) -> None:
        """Start the recurring rotation."""

        if self.active:
            return
        self.scheduler.add_job(
            self.refresh,
            "interval",
            job_id=ROTATION_JOB_ID,
            name="Quote rotation",
            seconds=self.interval,
        )
        self.active = True
        logger.info("Quote rotation active", extra={"interval": self.interval})

    def deactivate(self) -> None:
        """Cancel the recurring rotation and any pending transition clear."""

        if self.active:
            self.scheduler.remove_job(ROTATION_JOB_ID)
            self.active = False
        if self._transition_pending:
            self.scheduler.remove_job(TRANSITION_JOB_ID)
            self._transition_pending = False
        self.is_transitioning = False
        logger.info("Quote rotation stopped")

    def _select(self) -> CandidateQuote:
        snapshot = HabitSnapshot.from_habits(self._habits)
        return select_quote(snapshot, self._authored, self.rng)

    def _show(self, quote: Optional[CandidateQuote]) -> None:
        if quote is None and self.current is None:
            return
        self.current = quote
        if self.on_change is not None:
            self.on_change(quote)

    def _clear_transition(self) -> None:
        self._transition_pending = False
        self.is_transitioning = False


__all__ = ["QuoteRotator", "ROTATION_JOB_ID", "TRANSITION_JOB_ID"]
