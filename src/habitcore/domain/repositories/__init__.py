"""Repository protocol definitions for domain layer."""

from .activity import ActivityRepository
from .goal import GoalRepository
from .habit import HabitRepository

__all__ = [
    "ActivityRepository",
    "GoalRepository",
    "HabitRepository",
]
