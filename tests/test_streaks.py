"""Tests for the pure streak calculations.

These cover the incremental update used by completions, the full recompute
used after edits, and the grace-day tolerance at its inclusive boundary.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest

from habitcore.models.habit import HabitCompletion
from habitcore.services.streaks import (
    StreakState,
    advance_streak,
    longest_streak_in_history,
    recompute_current_streak,
    recompute_state,
    success_rate,
)

DAY1 = date(2025, 3, 1)


def day(n: int) -> date:
    return DAY1 + timedelta(days=n - 1)


def done(*days: int) -> list[HabitCompletion]:
    return [HabitCompletion(day=day(n), completed=True) for n in days]


class TestAdvanceStreak:
    """Incremental update applied to a trailing completion."""

    def test_first_completion_starts_streak(self):
        state = advance_streak(StreakState(), day(1), grace_days=0)

        assert state == StreakState(
            current_streak=1, longest_streak=1, grace_days_used=0, last_completed_date=day(1)
        )

    def test_first_completion_keeps_higher_longest(self):
        state = advance_streak(StreakState(longest_streak=9), day(1), grace_days=0)

        assert state.current_streak == 1
        assert state.longest_streak == 9

    def test_consecutive_day_extends_and_resets_grace(self):
        prior = StreakState(current_streak=1, longest_streak=1, grace_days_used=1, last_completed_date=day(1))

        state = advance_streak(prior, day(2), grace_days=0)

        assert (state.current_streak, state.longest_streak, state.grace_days_used) == (2, 2, 0)

    def test_gap_within_grace_extends(self):
        prior = StreakState(current_streak=1, longest_streak=1, last_completed_date=day(1))

        state = advance_streak(prior, day(3), grace_days=1)

        assert state.current_streak == 2
        assert state.grace_days_used == 1

    def test_gap_equal_to_grace_plus_one_is_inclusive(self):
        prior = StreakState(current_streak=3, longest_streak=3, last_completed_date=day(4))

        state = advance_streak(prior, day(7), grace_days=2)

        assert state.current_streak == 4
        assert state.grace_days_used == 2

    def test_gap_beyond_grace_resets(self):
        prior = StreakState(current_streak=1, longest_streak=1, last_completed_date=day(1))

        state = advance_streak(prior, day(4), grace_days=1)

        assert state.current_streak == 1
        assert state.grace_days_used == 0
        assert state.last_completed_date == day(4)

    def test_reset_does_not_lower_longest(self):
        prior = StreakState(current_streak=2, longest_streak=5, last_completed_date=day(10))

        state = advance_streak(prior, day(20), grace_days=1)

        assert state.current_streak == 1
        assert state.longest_streak == 5

    @pytest.mark.parametrize("completed_on", [DAY1, DAY1 - timedelta(days=3)])
    def test_non_trailing_day_is_rejected(self, completed_on):
        prior = StreakState(current_streak=1, longest_streak=1, last_completed_date=DAY1)

        with pytest.raises(ValueError):
            advance_streak(prior, completed_on, grace_days=3)


class TestRecomputeCurrentStreak:
    """Full walk over the history."""

    def test_empty_history_is_zero(self):
        assert recompute_current_streak([], grace_days=1) == 0

    def test_only_uncompleted_entries_is_zero(self):
        entries = [HabitCompletion(day=day(1), completed=False)]

        assert recompute_current_streak(entries, grace_days=1) == 0

    def test_consecutive_days(self):
        assert recompute_current_streak(done(1, 2, 3, 4), grace_days=0) == 4

    def test_stops_at_first_gap_beyond_grace(self):
        # 10, 9 consecutive; gap of 3 to 6 breaks with grace 1
        assert recompute_current_streak(done(1, 2, 6, 9, 10), grace_days=1) == 2

    def test_grace_bridges_gaps(self):
        assert recompute_current_streak(done(1, 2, 4), grace_days=1) == 3
        assert recompute_current_streak(done(1, 2, 4), grace_days=0) == 1

    def test_input_order_does_not_matter(self):
        shuffled = done(3, 1, 2)

        assert recompute_current_streak(shuffled, grace_days=0) == 3

    def test_uncompleted_day_splits_history(self):
        entries = done(1, 3) + [HabitCompletion(day=day(2), completed=False)]

        assert recompute_current_streak(entries, grace_days=0) == 1

    def test_is_deterministic(self):
        entries = done(1, 2, 4, 8, 9)

        results = {recompute_current_streak(entries, grace_days=1) for _ in range(5)}

        assert results == {2}


class TestRecomputeState:
    def test_keeps_longest_and_grace_used(self):
        prior = StreakState(current_streak=7, longest_streak=7, grace_days_used=1, last_completed_date=day(9))

        state = recompute_state(prior, done(1, 2, 3), grace_days=0)

        assert state.current_streak == 3
        assert state.longest_streak == 7
        assert state.grace_days_used == 1
        assert state.last_completed_date == day(3)

    def test_empty_history_clears_last_completed(self):
        prior = StreakState(current_streak=1, longest_streak=4, last_completed_date=day(1))

        state = recompute_state(prior, [], grace_days=0)

        assert state.current_streak == 0
        assert state.longest_streak == 4
        assert state.last_completed_date is None


class TestLongestStreakInHistory:
    def test_empty(self):
        assert longest_streak_in_history([], grace_days=0) == 0

    def test_picks_longest_run(self):
        entries = done(1, 2, 3, 10, 11, 12, 13, 14, 15, 16, 20, 21)

        assert longest_streak_in_history(entries, grace_days=0) == 7

    def test_grace_joins_runs(self):
        assert longest_streak_in_history(done(1, 3, 5, 9), grace_days=1) == 3


class TestSuccessRate:
    def test_five_completions_over_ten_days(self):
        assert success_rate(5, datetime(2025, 1, 1), date(2025, 1, 11)) == 50.0

    def test_partial_days_round_up(self):
        assert success_rate(1, datetime(2025, 1, 1, 12, 0), date(2025, 1, 3)) == 50.0

    def test_same_day_uses_one_day_minimum(self):
        assert success_rate(1, datetime(2025, 1, 1, 9, 30), date(2025, 1, 1)) == 100.0

    def test_daily_completions_since_creation_cap_at_100(self):
        # created mid-morning, so Jan 3 is only two rounded-up days later
        assert success_rate(3, datetime(2025, 1, 1, 9, 0), date(2025, 1, 3)) == 100.0

    def test_backfill_before_creation_caps_at_100(self):
        assert success_rate(4, datetime(2025, 1, 10), date(2025, 1, 2)) == 100.0
