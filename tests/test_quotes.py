"""Tests for personalized quote selection."""

from __future__ import annotations

import random
from types import SimpleNamespace

import pytest

from habitsage.services.habits import HabitProgress
from habitsage.services.quotes import (
    AUTHORED_QUOTE_PROBABILITY,
    PLACEHOLDER_AUTHOR,
    STATIC_QUOTES,
    AuthoredQuote,
    HabitSnapshot,
    personalized_templates,
    pick_uniform,
    select_quote,
    weighted_choice,
)

TRIALS = 10_000


def _habit(completed_today=False, current_streak=0, longest_streak=0):
    return SimpleNamespace(
        completed_today=completed_today,
        current_streak=current_streak,
        longest_streak=longest_streak,
    )


@pytest.fixture
def snapshot():
    return HabitSnapshot.from_habits(
        [_habit(True, 3, 5), _habit(False, 1, 9), _habit(True, 0, 2)]
    )


class TestHabitSnapshot:
    def test_aggregates_counts_sums_and_max(self, snapshot):
        assert snapshot == HabitSnapshot(
            total_habits=3, completed_today=2, total_streak=4, longest_streak=9
        )

    def test_empty_collection_has_zero_longest_streak(self):
        assert HabitSnapshot.from_habits([]) == HabitSnapshot(0, 0, 0, 0)

    def test_accepts_habit_progress_records(self):
        rows = [
            HabitProgress(
                habit_id=1,
                name="Read",
                target=2,
                completed=2,
                completed_today=True,
                current_streak=4,
                longest_streak=6,
            )
        ]
        assert HabitSnapshot.from_habits(rows).longest_streak == 6

    def test_does_not_mutate_input(self):
        habits = [_habit(True, 3, 5)]
        HabitSnapshot.from_habits(habits)
        assert habits[0].current_streak == 3
        assert len(habits) == 1


class TestTemplates:
    def test_four_templates_interpolate_statistics(self, snapshot):
        templates = personalized_templates(snapshot)

        assert len(templates) == 4
        assert templates[0].text.startswith("You're building 3 powerful habits.")
        assert templates[1].text.startswith("2 habits completed today.")
        assert templates[2].text.startswith("Your 9-day streak")
        assert templates[3].text.startswith("4 combined days of progress")
        assert [t.author for t in templates] == [
            "Your Journey",
            "Your Progress",
            "Your Achievement",
            "Your Impact",
        ]
        assert all(t.is_personalized and t.source == "template" for t in templates)
        assert all(t.category == "personal" for t in templates)

    def test_static_set_is_fixed_and_not_personalized(self):
        assert len(STATIC_QUOTES) == 5
        assert not any(q.is_personalized for q in STATIC_QUOTES)
        assert isinstance(STATIC_QUOTES, tuple)


class TestWeightedChoice:
    def test_draw_below_first_weight_picks_first(self, scripted_random):
        assert weighted_choice([(0.6, "a"), (0.4, "b")], scripted_random([0.59])) == "a"

    def test_draw_at_boundary_picks_second(self, scripted_random):
        assert weighted_choice([(0.6, "a"), (0.4, "b")], scripted_random([0.6])) == "b"

    def test_weights_need_not_sum_to_one(self, scripted_random):
        assert weighted_choice([(1, "a"), (3, "b")], scripted_random([0.3])) == "b"

    def test_zero_weight_option_is_never_chosen(self, scripted_random):
        options = [(1.0, "a"), (0.0, "never")]
        assert weighted_choice(options, scripted_random([0.999999])) == "a"

    @pytest.mark.parametrize(
        "options",
        [[], [(0, "a")], [(-1, "a"), (2, "b")]],
    )
    def test_invalid_weights_raise(self, options, scripted_random):
        with pytest.raises(ValueError):
            weighted_choice(options, scripted_random([0.5]))

    def test_pick_uniform_maps_draw_to_index(self, scripted_random):
        assert pick_uniform(["a", "b", "c"], scripted_random([0.99])) == "c"
        assert pick_uniform(["a", "b", "c"], scripted_random([0.0])) == "a"

    def test_pick_uniform_rejects_empty_pool(self, scripted_random):
        with pytest.raises(ValueError):
            pick_uniform([], scripted_random([0.1]))


class TestSelectQuoteDeterministic:
    def test_low_draw_selects_authored_quote(self, snapshot, scripted_random):
        authored = [AuthoredQuote(text="Mine", author=None, category="mindset")]

        chosen = select_quote(snapshot, authored, scripted_random([0.1, 0.0]))

        assert chosen.text == "Mine"
        assert chosen.author == PLACEHOLDER_AUTHOR
        assert chosen.category == "mindset"
        assert chosen.is_personalized is True
        assert chosen.source == "authored"

    def test_authored_pick_is_uniform_over_list(self, snapshot, scripted_random):
        authored = [AuthoredQuote(text=t, author="Me") for t in ("one", "two", "three")]

        chosen = select_quote(snapshot, authored, scripted_random([0.59, 0.99]))

        assert chosen.text == "three"
        assert chosen.author == "Me"

    def test_high_draw_falls_through_to_pool(self, snapshot, scripted_random):
        authored = [AuthoredQuote(text="Mine")]

        chosen = select_quote(snapshot, authored, scripted_random([0.6, 0.0]))

        assert chosen.source == "template"
        assert chosen.author == "Your Journey"

    def test_pool_places_static_quotes_after_templates(self, snapshot, scripted_random):
        chosen = select_quote(snapshot, [AuthoredQuote(text="Mine")], scripted_random([0.9, 0.99]))

        assert chosen == STATIC_QUOTES[-1]

    def test_no_authored_quotes_uses_single_draw(self, snapshot, scripted_random):
        rng = scripted_random([0.5])

        chosen = select_quote(snapshot, [], rng)

        # 9 entries in the pool: index 4 is the first static quote
        assert chosen == STATIC_QUOTES[0]
        assert rng.calls == 1

    def test_blank_author_defaults_to_placeholder(self, snapshot, scripted_random):
        authored = [AuthoredQuote(text="Keep going", author="   ", category="motivation")]

        chosen = select_quote(snapshot, authored, scripted_random([0.0, 0.0]))

        assert chosen.author == "You"


class TestSelectQuoteDistribution:
    def test_authored_quotes_win_about_sixty_percent(self, snapshot):
        rng = random.Random(1234)
        authored = [AuthoredQuote(text="A"), AuthoredQuote(text="B", author="Me")]

        hits = sum(
            select_quote(snapshot, authored, rng).source == "authored" for _ in range(TRIALS)
        )

        assert abs(hits / TRIALS - AUTHORED_QUOTE_PROBABILITY) <= 0.05

    def test_empty_authored_list_never_yields_authored_source(self, snapshot):
        rng = random.Random(99)

        sources = {select_quote(snapshot, [], rng).source for _ in range(2_000)}

        assert "authored" not in sources
        assert sources == {"template", "static"}

    def test_unchanged_inputs_can_give_different_results(self, snapshot):
        rng = random.Random(7)

        texts = {select_quote(snapshot, [], rng).text for _ in range(200)}

        assert len(texts) > 1

    def test_single_habit_without_authored_quotes(self):
        habits = [_habit(completed_today=True, current_streak=3, longest_streak=5)]
        snap = HabitSnapshot.from_habits(habits)
        allowed = {q.text for q in personalized_templates(snap)} | {q.text for q in STATIC_QUOTES}
        rng = random.Random(2024)

        for _ in range(1_000):
            chosen = select_quote(snap, [], rng)
            assert chosen.text in allowed
            assert chosen.is_personalized == (chosen.source == "template")

    def test_keep_going_appears_with_placeholder_author(self, snapshot):
        authored = [AuthoredQuote(text="Keep going", author="", category="motivation")]
        rng = random.Random(42)

        picks = [select_quote(snapshot, authored, rng) for _ in range(TRIALS)]
        keep_going = [q for q in picks if q.text == "Keep going"]

        assert all(q.author == "You" for q in keep_going)
        assert abs(len(keep_going) / TRIALS - 0.6) <= 0.05

    def test_default_random_source(self, snapshot):
        chosen = select_quote(snapshot, [AuthoredQuote(text="x")])
        assert chosen.text
