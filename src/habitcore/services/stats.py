"""Read-only projections over a habit's completion history."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from ..domain.repositories.habit import HabitRepository
from ..errors import HabitNotFound
from ..models.habit import Habit, HabitCompletion
from ..utils.dates import midnight, month_bounds

HISTORY_LIMIT = 90


@dataclass
class HabitStats:
    """Headline numbers for a habit's detail view."""

    habit_id: int
    current_streak: int
    longest_streak: int
    total_completions: int
    success_rate: float
    last_7_days_count: int
    last_30_days_count: int
    completion_history: list[HabitCompletion] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "habit_id": self.habit_id,
            "current_streak": self.current_streak,
            "longest_streak": self.longest_streak,
            "total_completions": self.total_completions,
            "success_rate": self.success_rate,
            "last_7_days_count": self.last_7_days_count,
            "last_30_days_count": self.last_30_days_count,
            "completion_history": [entry.model_dump(mode="json") for entry in self.completion_history],
        }


@dataclass
class HabitCalendar:
    """One month of completion flags keyed by ISO date."""

    year: int
    month: int
    calendar: dict[str, bool]
    total_days: int
    streak: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "year": self.year,
            "month": self.month,
            "calendar": dict(self.calendar),
            "total_days": self.total_days,
            "streak": self.streak,
        }


def last_n_days_count(entries: list[HabitCompletion], *, now: datetime, days: int) -> int:
    """Completed entries dated no more than ``days`` days before ``now``."""

    window = days * 86400
    return sum(
        1
        for entry in entries
        if entry.completed and (now - midnight(entry.day)).total_seconds() <= window
    )


def habit_stats(habit: Habit, *, now: datetime, history_limit: int = HISTORY_LIMIT) -> HabitStats:
    entries = habit.completion_entries()
    return HabitStats(
        habit_id=habit.id,
        current_streak=habit.current_streak,
        longest_streak=habit.longest_streak,
        total_completions=habit.total_completions,
        success_rate=habit.success_rate,
        last_7_days_count=last_n_days_count(entries, now=now, days=7),
        last_30_days_count=last_n_days_count(entries, now=now, days=30),
        completion_history=entries[-history_limit:],
    )


def habit_calendar(habit: Habit, year: int, month: int) -> HabitCalendar:
    """Month grid; days without an entry are simply absent."""

    first, last = month_bounds(year, month)
    calendar = {
        entry.day.isoformat(): entry.completed
        for entry in habit.completion_entries()
        if first <= entry.day <= last
    }
    return HabitCalendar(
        year=year,
        month=month,
        calendar=calendar,
        total_days=last.day,
        streak=habit.current_streak,
    )


def _load(repo: HabitRepository, habit_id: int, owner_id: int) -> Habit:
    habit = repo.get_by_id(habit_id, owner_id=owner_id)
    if habit is None:
        raise HabitNotFound(habit_id)
    return habit


def get_habit_stats(
    repo: HabitRepository,
    habit_id: int,
    *,
    owner_id: int,
    now: datetime,
    history_limit: int = HISTORY_LIMIT,
) -> HabitStats:
    return habit_stats(_load(repo, habit_id, owner_id), now=now, history_limit=history_limit)


def get_habit_calendar(
    repo: HabitRepository, habit_id: int, *, owner_id: int, year: int, month: int
) -> HabitCalendar:
    return habit_calendar(_load(repo, habit_id, owner_id), year, month)


__all__ = [
    "HabitCalendar",
    "HabitStats",
    "get_habit_calendar",
    "get_habit_stats",
    "habit_calendar",
    "habit_stats",
    "last_n_days_count",
]
