"""Goal progress driven by habit completions."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..domain.repositories.goal import GoalRepository
from ..logging_config import get_logger
from ..models.goal import Goal, GoalStatus, GoalType
from ..utils.dates import Clock, system_clock
from .effects import ActivityEvent, ActivitySink

logger = get_logger("services.goals")


def apply_goal_progress(goal: Goal, delta: float, *, now: datetime) -> bool:
    """Add ``delta`` to the goal and evaluate milestones and completion.

    Returns True when this call moved the goal to ``completed``.
    """

    goal.current_value += delta

    milestones = goal.milestone_entries()
    for milestone in milestones:
        if not milestone.completed and goal.current_value >= milestone.target_value:
            milestone.completed = True
            milestone.completed_at = now
    goal.set_milestone_entries(milestones)

    if goal.status != GoalStatus.ACTIVE.value:
        return False

    if goal.goal_type == GoalType.BINARY.value:
        if delta > 0:
            goal.status = GoalStatus.COMPLETED.value
            goal.completed_at = now
            goal.current_value = goal.target_value
            return True
        return False

    if goal.current_value >= goal.target_value:
        goal.status = GoalStatus.COMPLETED.value
        goal.completed_at = now
        return True
    return False


class HabitGoalPropagator:
    """Applies habit deltas to linked goals stored in a goal repository."""

    def __init__(
        self,
        repository: GoalRepository,
        *,
        activity_sink: Optional[ActivitySink] = None,
        clock: Clock = system_clock,
    ) -> None:
        self.repository = repository
        self.activity_sink = activity_sink
        self.clock = clock

    def propagate(
        self, owner_id: int, habit_id: int, delta: int, *, goal_id: Optional[int] = None
    ) -> None:
        if goal_id is None:
            goals = self.repository.list_active_for_habit(habit_id, owner_id=owner_id)
        else:
            goal = self.repository.get_by_id(goal_id, owner_id=owner_id)
            if not self._accepts(goal, habit_id):
                logger.info(
                    "Skipping goal not linked to habit",
                    extra={"goal_id": goal_id, "habit_id": habit_id, "owner_id": owner_id},
                )
                return
            goals = [goal]

        for goal in goals:
            self._apply(goal, delta, owner_id=owner_id)

    @staticmethod
    def _accepts(goal: Optional[Goal], habit_id: int) -> bool:
        return (
            goal is not None
            and goal.status == GoalStatus.ACTIVE.value
            and habit_id in (goal.linked_habits or [])
        )

    def _apply(self, goal: Goal, delta: int, *, owner_id: int) -> None:
        now = self.clock()
        completed = apply_goal_progress(goal, delta, now=now)
        self.repository.save(goal)
        logger.info(
            "Goal progress updated",
            extra={"goal_id": goal.id, "delta": delta, "current_value": goal.current_value},
        )

        if completed and goal.goal_type != GoalType.BINARY.value and self.activity_sink is not None:
            self.activity_sink.emit(
                ActivityEvent(
                    owner_id=owner_id,
                    team_id=goal.team_id,
                    action="goal_completed",
                    target_type="goal",
                    target_id=goal.id,
                    details={"title": goal.title, "final_value": goal.current_value},
                )
            )


__all__ = ["HabitGoalPropagator", "apply_goal_progress"]
