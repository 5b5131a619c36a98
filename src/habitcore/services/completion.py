"""Completion service: records a habit's daily completions and keeps its
streak cache, success rate, and linked goals in step.

Each call is a read-modify-write of one habit document. There is no version
check, so two concurrent writers for the same habit race and the last save
wins. Goal progress and activity events are published only after the habit
has been saved, and their failures never reach the caller.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Optional

from ..config import BaseConfig
from ..domain.repositories.habit import HabitRepository
from ..errors import AlreadyCompleted, HabitNotFound, NoCompletionFound
from ..logging_config import get_logger
from ..models.habit import Habit, HabitCompletion
from ..utils.dates import Clock, DayLike, as_day, system_clock
from .effects import ActivityEvent, Effect, EffectDispatcher, GoalProgressDelta
from .streaks import (
    StreakState,
    advance_streak,
    longest_streak_in_history,
    recompute_state,
    success_rate,
)

logger = get_logger("services.completion")

DEFAULT_MILESTONE_INTERVAL = 7


def _state_of(habit: Habit) -> StreakState:
    return StreakState(
        current_streak=habit.current_streak,
        longest_streak=habit.longest_streak,
        grace_days_used=habit.grace_days_used,
        last_completed_date=habit.last_completed_date,
    )


def _apply_state(habit: Habit, state: StreakState) -> None:
    habit.current_streak = state.current_streak
    habit.longest_streak = state.longest_streak
    habit.grace_days_used = state.grace_days_used
    habit.last_completed_date = state.last_completed_date


class CompletionService:
    """Complete / uncomplete / repair operations on a single habit."""

    def __init__(
        self,
        repository: HabitRepository,
        *,
        dispatcher: Optional[EffectDispatcher] = None,
        clock: Clock = system_clock,
        config: Optional[BaseConfig] = None,
    ) -> None:
        self.repository = repository
        self.dispatcher = dispatcher or EffectDispatcher()
        self.clock = clock
        self.milestone_interval = (
            config.MILESTONE_INTERVAL if config is not None else DEFAULT_MILESTONE_INTERVAL
        )

    def _load(self, habit_id: int, owner_id: int) -> Habit:
        habit = self.repository.get_by_id(habit_id, owner_id=owner_id)
        if habit is None:
            raise HabitNotFound(habit_id)
        return habit

    def complete(
        self,
        habit_id: int,
        *,
        owner_id: int,
        on: Optional[DayLike] = None,
        notes: Optional[str] = None,
    ) -> Habit:
        """Mark ``on`` (default: today) as completed."""

        day = as_day(on) if on is not None else as_day(self.clock())
        habit = self._load(habit_id, owner_id)

        entries = habit.completion_entries()
        existing = next((entry for entry in entries if entry.day == day), None)
        if existing is not None and existing.completed:
            raise AlreadyCompleted(habit_id, day)

        if existing is not None:
            existing.completed = True
            existing.notes = notes or ""
        else:
            entries.append(HabitCompletion(day=day, completed=True, notes=notes or ""))
        habit.set_completion_entries(entries)
        habit.total_completions += 1

        state = _state_of(habit)
        if state.last_completed_date is None or day > state.last_completed_date:
            state = advance_streak(state, day, grace_days=habit.grace_days)
        else:
            # Backfill of an earlier day: the running streak may now bridge a gap.
            state = recompute_state(state, entries, grace_days=habit.grace_days)
            state = replace(state, longest_streak=max(state.longest_streak, state.current_streak))
        _apply_state(habit, state)

        habit.success_rate = success_rate(habit.total_completions, habit.created_at, day)
        habit.updated_at = self.clock()
        habit = self.repository.save(habit)

        logger.info(
            "Habit completed",
            extra={
                "habit_id": habit.id,
                "owner_id": owner_id,
                "day": day.isoformat(),
                "current_streak": habit.current_streak,
            },
        )

        effects: list[Effect] = self._goal_deltas(habit, owner_id, +1)
        details = {"name": habit.name, "streak": habit.current_streak}
        effects.append(self._event(habit, owner_id, "habit_completed", details))
        if habit.current_streak > 0 and habit.current_streak % self.milestone_interval == 0:
            effects.append(self._event(habit, owner_id, "habit_streak_milestone", details))
        self.dispatcher.publish_all(effects)
        return habit

    def uncomplete(self, habit_id: int, *, owner_id: int, on: DayLike) -> Habit:
        """Undo the completion recorded for ``on``."""

        day = as_day(on)
        habit = self._load(habit_id, owner_id)

        entries = habit.completion_entries()
        existing = next((entry for entry in entries if entry.day == day), None)
        if existing is None or not existing.completed:
            raise NoCompletionFound(habit_id, day)

        existing.completed = False
        habit.set_completion_entries(entries)
        habit.total_completions = max(0, habit.total_completions - 1)

        # A past day changed, so trailing state cannot be patched incrementally.
        _apply_state(habit, recompute_state(_state_of(habit), entries, grace_days=habit.grace_days))

        now = self.clock()
        habit.success_rate = success_rate(habit.total_completions, habit.created_at, as_day(now))
        habit.updated_at = now
        habit = self.repository.save(habit)

        logger.info(
            "Habit uncompleted",
            extra={
                "habit_id": habit.id,
                "owner_id": owner_id,
                "day": day.isoformat(),
                "current_streak": habit.current_streak,
            },
        )

        effects: list[Effect] = self._goal_deltas(habit, owner_id, -1)
        effects.append(
            self._event(habit, owner_id, "habit_uncompleted", {"name": habit.name, "date": day.isoformat()})
        )
        self.dispatcher.publish_all(effects)
        return habit

    def recompute(self, habit_id: int, *, owner_id: int, rebuild_longest: bool = False) -> Habit:
        """Rebuild the cached counters from the completion history.

        Only ``rebuild_longest`` may lower ``longest_streak``.
        """

        habit = self._load(habit_id, owner_id)
        entries = habit.completion_entries()

        state = recompute_state(_state_of(habit), entries, grace_days=habit.grace_days)
        if rebuild_longest:
            longest = longest_streak_in_history(entries, grace_days=habit.grace_days)
        else:
            longest = max(state.longest_streak, state.current_streak)
        _apply_state(habit, replace(state, longest_streak=longest))
        habit.total_completions = sum(1 for entry in entries if entry.completed)

        now = self.clock()
        habit.success_rate = success_rate(habit.total_completions, habit.created_at, as_day(now))
        habit.updated_at = now
        habit = self.repository.save(habit)

        logger.info(
            "Habit streaks recomputed",
            extra={
                "habit_id": habit.id,
                "current_streak": habit.current_streak,
                "longest_streak": habit.longest_streak,
                "rebuild_longest": rebuild_longest,
            },
        )
        return habit

    @staticmethod
    def _goal_deltas(habit: Habit, owner_id: int, delta: int) -> list[Effect]:
        return [
            GoalProgressDelta(owner_id=owner_id, habit_id=habit.id, goal_id=goal_id, delta=delta)
            for goal_id in habit.linked_goals or []
        ]

    @staticmethod
    def _event(habit: Habit, owner_id: int, action: str, details: dict) -> ActivityEvent:
        return ActivityEvent(
            owner_id=owner_id,
            team_id=habit.team_id,
            action=action,
            target_type="habit",
            target_id=habit.id,
            details=dict(details),
        )


__all__ = ["CompletionService"]
