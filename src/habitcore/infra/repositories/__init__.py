"""Concrete repository implementations using SQLModel."""

from .activity import SQLModelActivityRepository
from .goal import SQLModelGoalRepository
from .habit import SQLModelHabitRepository

__all__ = [
    "SQLModelActivityRepository",
    "SQLModelGoalRepository",
    "SQLModelHabitRepository",
]
