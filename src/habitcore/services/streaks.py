"""Streak calculation over a habit's completion history.

Everything here is pure: callers pass in the history and grace policy and
get new values back. Two algorithms are provided:

* ``advance_streak`` - incremental update when a completion lands strictly
  after the last completed day.
* ``recompute_current_streak`` - full walk of the history, used whenever a
  past day is edited.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Iterable, Optional

from ..models.habit import HabitCompletion
from ..utils.dates import days_between, midnight


@dataclass(frozen=True)
class StreakState:
    """Cached streak counters of a habit."""

    current_streak: int = 0
    longest_streak: int = 0
    grace_days_used: int = 0
    last_completed_date: Optional[date] = None


def _within_tolerance(days_diff: int, grace_days: int) -> bool:
    return days_diff == 1 or days_diff <= grace_days + 1


def completed_days(entries: Iterable[HabitCompletion]) -> list[date]:
    """Distinct completed days, most recent first."""

    return sorted({entry.day for entry in entries if entry.completed}, reverse=True)


def advance_streak(state: StreakState, completed_on: date, *, grace_days: int) -> StreakState:
    """Apply one new trailing completion to ``state``.

    Raises ``ValueError`` when ``completed_on`` is not after the last
    completed day; such backfills must go through a full recompute.
    """

    if state.last_completed_date is None:
        return StreakState(
            current_streak=1,
            longest_streak=max(state.longest_streak, 1),
            grace_days_used=0,
            last_completed_date=completed_on,
        )

    days_diff = days_between(completed_on, state.last_completed_date)
    if days_diff <= 0:
        raise ValueError(
            f"{completed_on.isoformat()} is not after last completion "
            f"{state.last_completed_date.isoformat()}; recompute instead"
        )

    if days_diff == 1:
        current, used = state.current_streak + 1, 0
    elif days_diff <= grace_days + 1:
        current, used = state.current_streak + 1, days_diff - 1
    else:
        current, used = 1, 0

    return StreakState(
        current_streak=current,
        longest_streak=max(state.longest_streak, current),
        grace_days_used=used,
        last_completed_date=completed_on,
    )


def recompute_current_streak(entries: Iterable[HabitCompletion], *, grace_days: int) -> int:
    """Walk completed days newest first until the first gap beyond grace."""

    days = completed_days(entries)
    if not days:
        return 0

    streak = 1
    prev = days[0]
    for curr in days[1:]:
        if not _within_tolerance(days_between(prev, curr), grace_days):
            break
        streak += 1
        prev = curr
    return streak


def recompute_state(
    state: StreakState, entries: Iterable[HabitCompletion], *, grace_days: int
) -> StreakState:
    """Full recompute of the current streak.

    ``longest_streak`` and ``grace_days_used`` are carried over untouched;
    ``last_completed_date`` follows the history.
    """

    entries = list(entries)
    days = completed_days(entries)
    return replace(
        state,
        current_streak=recompute_current_streak(entries, grace_days=grace_days),
        last_completed_date=days[0] if days else None,
    )


def longest_streak_in_history(entries: Iterable[HabitCompletion], *, grace_days: int) -> int:
    """Longest grace-tolerant run anywhere in the history."""

    days = sorted(completed_days(entries))
    longest = 0
    run = 0
    last_day: date | None = None
    for d in days:
        if last_day is None or _within_tolerance(days_between(d, last_day), grace_days):
            run += 1
        else:
            longest = max(longest, run)
            run = 1
        last_day = d
    return max(longest, run)


def success_rate(total_completions: int, created_at: datetime, as_of: date) -> float:
    """Percentage of elapsed days (rounded up, at least one) with a completion.

    Capped at 100; completions can outnumber elapsed days.
    """

    elapsed = (midnight(as_of) - created_at).total_seconds() / 86400
    rate = total_completions / max(math.ceil(elapsed), 1) * 100
    return min(rate, 100.0)


__all__ = [
    "StreakState",
    "advance_streak",
    "completed_days",
    "longest_streak_in_history",
    "recompute_current_streak",
    "recompute_state",
    "success_rate",
]
