"""Habit lifecycle helpers: create, list, update, soft delete."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Iterable, Optional

from ..domain.repositories.habit import HabitRepository
from ..errors import HabitNotFound, ValidationError
from ..logging_config import get_logger
from ..models.habit import Habit, HabitFrequency
from ..utils.dates import as_day
from .streaks import StreakState, recompute_state

logger = get_logger("services.habits")

DEFAULT_GRACE_DAYS = 1
_UPDATABLE_FIELDS = {
    "name",
    "description",
    "frequency",
    "times_per_week",
    "grace_days",
    "linked_goals",
    "is_active",
}


def _clean_name(name: Optional[str]) -> str:
    cleaned = (name or "").strip()
    if not cleaned:
        raise ValidationError("Habit name is required")
    return cleaned


def _clean_frequency(frequency: str | HabitFrequency) -> str:
    try:
        return HabitFrequency(frequency).value
    except ValueError as exc:
        allowed = ", ".join(f.value for f in HabitFrequency)
        raise ValidationError(f"Frequency must be one of: {allowed}") from exc


def _clean_grace_days(grace_days: Any) -> int:
    if isinstance(grace_days, bool) or not isinstance(grace_days, int) or grace_days < 0:
        raise ValidationError("Grace days must be a non-negative integer")
    return grace_days


def _clean_times_per_week(times_per_week: Optional[int]) -> Optional[int]:
    if times_per_week is None:
        return None
    if isinstance(times_per_week, bool) or not isinstance(times_per_week, int) or not 1 <= times_per_week <= 7:
        raise ValidationError("Times per week must be between 1 and 7")
    return times_per_week


def create_habit(
    repo: HabitRepository,
    *,
    owner_id: int,
    name: str,
    frequency: str | HabitFrequency,
    description: str = "",
    times_per_week: Optional[int] = None,
    grace_days: Optional[int] = None,
    linked_goals: Iterable[int] = (),
    team_id: Optional[int] = None,
    now: Optional[datetime] = None,
    default_grace_days: int = DEFAULT_GRACE_DAYS,
) -> Habit:
    """Validate and persist a new habit for ``owner_id``."""

    created_at = now or datetime.now()
    habit = Habit(
        owner_id=owner_id,
        team_id=team_id,
        name=_clean_name(name),
        description=(description or "").strip(),
        frequency=_clean_frequency(frequency),
        times_per_week=_clean_times_per_week(times_per_week),
        grace_days=_clean_grace_days(default_grace_days if grace_days is None else grace_days),
        linked_goals=list(linked_goals),
        created_at=created_at,
        updated_at=created_at,
    )
    habit = repo.create(habit)
    logger.info("Habit created", extra={"habit_id": habit.id, "owner_id": owner_id})
    return habit


def list_habits(
    repo: HabitRepository,
    *,
    owner_id: int,
    include_inactive: bool = False,
    team_id: Optional[int] = None,
) -> list[Habit]:
    return repo.list_for_owner(owner_id=owner_id, include_inactive=include_inactive, team_id=team_id)


def todays_habits(
    repo: HabitRepository,
    *,
    owner_id: int,
    today: date | datetime,
    team_id: Optional[int] = None,
) -> list[tuple[Habit, bool]]:
    """Active habits paired with whether they are already done today."""

    day = as_day(today)
    result = []
    for habit in list_habits(repo, owner_id=owner_id, team_id=team_id):
        entry = habit.entry_for(day)
        result.append((habit, bool(entry and entry.completed)))
    return result


def update_habit(
    repo: HabitRepository,
    habit_id: int,
    *,
    owner_id: int,
    now: Optional[datetime] = None,
    **changes: Any,
) -> Habit:
    """Apply whitelisted field changes to a habit."""

    unknown = set(changes) - _UPDATABLE_FIELDS
    if unknown:
        raise ValidationError(f"Cannot update field(s): {', '.join(sorted(unknown))}")

    habit = repo.get_by_id(habit_id, owner_id=owner_id)
    if habit is None:
        raise HabitNotFound(habit_id)

    if "name" in changes:
        habit.name = _clean_name(changes["name"])
    if "description" in changes:
        habit.description = (changes["description"] or "").strip()
    if "frequency" in changes:
        habit.frequency = _clean_frequency(changes["frequency"])
    if "times_per_week" in changes:
        habit.times_per_week = _clean_times_per_week(changes["times_per_week"])
    if "linked_goals" in changes:
        habit.linked_goals = list(changes["linked_goals"] or [])
    if "is_active" in changes:
        habit.is_active = bool(changes["is_active"])
    if "grace_days" in changes:
        grace_days = _clean_grace_days(changes["grace_days"])
        if grace_days != habit.grace_days:
            habit.grace_days = grace_days
            state = recompute_state(
                StreakState(
                    current_streak=habit.current_streak,
                    longest_streak=habit.longest_streak,
                    grace_days_used=habit.grace_days_used,
                    last_completed_date=habit.last_completed_date,
                ),
                habit.completion_entries(),
                grace_days=grace_days,
            )
            habit.current_streak = state.current_streak
            habit.longest_streak = max(habit.longest_streak, state.current_streak)

    habit.updated_at = now or datetime.now()
    habit = repo.save(habit)
    logger.info("Habit updated", extra={"habit_id": habit_id, "fields": sorted(changes)})
    return habit


def delete_habit(
    repo: HabitRepository, habit_id: int, *, owner_id: int, now: Optional[datetime] = None
) -> Habit:
    """Soft delete: the history stays available for stats."""

    return update_habit(repo, habit_id, owner_id=owner_id, now=now, is_active=False)


__all__ = [
    "create_habit",
    "delete_habit",
    "list_habits",
    "todays_habits",
    "update_habit",
]
