"""SQLModel table exports."""

from .activity import Activity
from .goal import Goal, GoalMilestone, GoalStatus, GoalType
from .habit import Habit, HabitCompletion, HabitFrequency

__all__ = [
    "Activity",
    "Goal",
    "GoalMilestone",
    "GoalStatus",
    "GoalType",
    "Habit",
    "HabitCompletion",
    "HabitFrequency",
]
