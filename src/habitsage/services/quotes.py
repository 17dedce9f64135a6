"""Personalized quote selection.

Picks one quote to show from the user's own authored quotes, a handful of
templates filled in from the user's habit statistics, and a fixed set of
built-in motivational quotes. Authored quotes are favored: when any exist they
win 60% of the time.

All randomness comes from an injectable source exposing ``random()`` so callers
(and tests) can drive the branch outcomes exactly.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Iterable, Literal, Optional, Protocol, Sequence, TypeVar

from ..logging_config import get_logger

logger = get_logger("services.quotes")

T = TypeVar("T")

AUTHORED_QUOTE_PROBABILITY = 0.6
PLACEHOLDER_AUTHOR = "You"
DEFAULT_QUOTE_CATEGORY = "personal"
QUOTE_CATEGORIES = ("personal", "motivation", "mindset", "success", "habits", "inspiration")

QuoteSource = Literal["authored", "template", "static"]


class RandomSource(Protocol):
    """Minimal random interface; ``random.Random`` satisfies it."""

    def random(self) -> float:  # pragma: no cover - interface
        ...


class HabitRecord(Protocol):
    """The fields a habit record must expose to be summarized."""

    completed_today: bool
    current_streak: int
    longest_streak: int


@dataclass(frozen=True)
class HabitSnapshot:
    """Aggregate view of the user's habits at selection time."""

    total_habits: int = 0
    completed_today: int = 0
    total_streak: int = 0
    longest_streak: int = 0

    @classmethod
    def from_habits(cls, habits: Iterable[HabitRecord]) -> "HabitSnapshot":
        habits = list(habits)
        return cls(
            total_habits=len(habits),
            completed_today=sum(1 for h in habits if h.completed_today),
            total_streak=sum(h.current_streak for h in habits),
            longest_streak=max((h.longest_streak for h in habits), default=0),
        )


@dataclass(frozen=True)
class AuthoredQuote:
    """A quote the user wrote, as read from the quote store."""

    text: str
    author: Optional[str] = None
    category: str = DEFAULT_QUOTE_CATEGORY
    id: Optional[int | str] = None


@dataclass(frozen=True)
class CandidateQuote:
    """A quote ready for display."""

    text: str
    author: str
    category: str
    is_personalized: bool
    source: QuoteSource


STATIC_QUOTES: tuple[CandidateQuote, ...] = (
    CandidateQuote(
        text="Your habits shape your identity, and your identity shapes your habits.",
        author="James Clear",
        category="habits",
        is_personalized=False,
        source="static",
    ),
    CandidateQuote(
        text="Success is the sum of small efforts repeated day in and day out.",
        author="Robert Collier",
        category="consistency",
        is_personalized=False,
        source="static",
    ),
    CandidateQuote(
        text="The compound effect of small improvements is remarkable.",
        author="Atomic Habits",
        category="progress",
        is_personalized=False,
        source="static",
    ),
    CandidateQuote(
        text="Excellence is not an act, but a habit.",
        author="Aristotle",
        category="excellence",
        is_personalized=False,
        source="static",
    ),
    CandidateQuote(
        text="Progress, not perfection, is the goal.",
        author="Habit Tracker Wisdom",
        category="mindset",
        is_personalized=False,
        source="static",
    ),
)


def personalized_templates(snapshot: HabitSnapshot) -> list[CandidateQuote]:
    """Return the four quotes built from the user's own statistics."""

    def _template(text: str, author: str) -> CandidateQuote:
        return CandidateQuote(
            text=text,
            author=author,
            category=DEFAULT_QUOTE_CATEGORY,
            is_personalized=True,
            source="template",
        )

    return [
        _template(
            f"You're building {snapshot.total_habits} powerful habits. "
            "Each day is a step toward the person you're becoming.",
            "Your Journey",
        ),
        _template(
            f"{snapshot.completed_today} habits completed today. "
            "You're proving that consistency beats perfection every time.",
            "Your Progress",
        ),
        _template(
            f"Your {snapshot.longest_streak}-day streak shows what you're capable of. "
            "Keep building on that foundation.",
            "Your Achievement",
        ),
        _template(
            f"{snapshot.total_streak} combined days of progress across all habits. "
            "That's the power of compound growth.",
            "Your Impact",
        ),
    ]


def weighted_choice(options: Sequence[tuple[float, T]], rng: RandomSource) -> T:
    """Pick a value from ``(weight, value)`` pairs with one draw from ``rng``."""

    if not options:
        raise ValueError("weighted_choice needs at least one option")
    if any(weight < 0 for weight, _ in options):
        raise ValueError("weights must be non-negative")
    total = sum(weight for weight, _ in options)
    if total <= 0:
        raise ValueError("weights must add up to a positive total")

    point = rng.random() * total
    cumulative = 0.0
    for weight, value in options:
        cumulative += weight
        if point < cumulative:
            return value
    # Float rounding can leave point == total; fall back to the last weighted option.
    return next(value for weight, value in reversed(options) if weight > 0)


def pick_uniform(pool: Sequence[T], rng: RandomSource) -> T:
    """Pick one element of ``pool`` uniformly with one draw from ``rng``."""

    if not pool:
        raise ValueError("cannot pick from an empty pool")
    index = min(int(rng.random() * len(pool)), len(pool) - 1)
    return pool[index]


def _from_authored(quote: AuthoredQuote) -> CandidateQuote:
    author = (quote.author or "").strip() or PLACEHOLDER_AUTHOR
    return CandidateQuote(
        text=quote.text,
        author=author,
        category=quote.category or DEFAULT_QUOTE_CATEGORY,
        is_personalized=True,
        source="authored",
    )


def select_quote(
    snapshot: HabitSnapshot,
    authored: Sequence[AuthoredQuote],
    rng: RandomSource | None = None,
) -> CandidateQuote:
    """Choose one quote to display.

    With authored quotes present, one of them is returned with probability
    ``AUTHORED_QUOTE_PROBABILITY``. Otherwise the pick is uniform over the four
    statistic templates plus every static quote.
    """

    rng = rng or random.Random()

    if authored:
        branch = weighted_choice(
            [
                (AUTHORED_QUOTE_PROBABILITY, "authored"),
                (1 - AUTHORED_QUOTE_PROBABILITY, "pool"),
            ],
            rng,
        )
        if branch == "authored":
            chosen = _from_authored(pick_uniform(authored, rng))
            logger.debug("Selected authored quote", extra={"category": chosen.category})
            return chosen

    pool = [*personalized_templates(snapshot), *STATIC_QUOTES]
    chosen = pick_uniform(pool, rng)
    logger.debug("Selected %s quote", chosen.source, extra={"category": chosen.category})
    return chosen


__all__ = [
    "AUTHORED_QUOTE_PROBABILITY",
    "DEFAULT_QUOTE_CATEGORY",
    "PLACEHOLDER_AUTHOR",
    "QUOTE_CATEGORIES",
    "STATIC_QUOTES",
    "AuthoredQuote",
    "CandidateQuote",
    "HabitRecord",
    "HabitSnapshot",
    "RandomSource",
    "personalized_templates",
    "pick_uniform",
    "select_quote",
    "weighted_choice",
]
