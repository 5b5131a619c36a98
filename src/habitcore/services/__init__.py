"""Service module exports."""

from . import activity, completion, effects, goals, habits, stats, streaks

__all__ = [
    "activity",
    "completion",
    "effects",
    "goals",
    "habits",
    "stats",
    "streaks",
]
