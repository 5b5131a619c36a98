"""Domain error taxonomy for the habit engine.

Validation-class errors carry a ``status_code`` so an outer HTTP layer can map
them to 4xx responses without knowing each type.
"""

from __future__ import annotations

from datetime import date
from typing import Any


class HabitCoreError(Exception):
    """Base class for user-correctable engine errors."""

    status_code = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, Any]:
        return {"error": type(self).__name__, "message": self.message}


class ValidationError(HabitCoreError):
    """Input rejected before any mutation took place."""


class HabitNotFound(HabitCoreError):
    """Habit does not exist or is not owned by the caller."""

    status_code = 404

    def __init__(self, habit_id: object) -> None:
        super().__init__("Habit not found")
        self.habit_id = habit_id


class AlreadyCompleted(HabitCoreError):
    """The habit is already marked complete for the given day."""

    status_code = 409

    def __init__(self, habit_id: object, day: date) -> None:
        super().__init__(f"Habit already completed for {day.isoformat()}")
        self.habit_id = habit_id
        self.day = day


class NoCompletionFound(HabitCoreError):
    """There is no completed entry to undo for the given day."""

    status_code = 404

    def __init__(self, habit_id: object, day: date) -> None:
        super().__init__(f"No completion found for {day.isoformat()}")
        self.habit_id = habit_id
        self.day = day


class PropagationFailure(Exception):
    """A best-effort side effect failed; logged, never raised to callers."""

    def __init__(self, effect: object, cause: BaseException) -> None:
        super().__init__(f"{type(effect).__name__} failed: {cause}")
        self.effect = effect
        self.cause = cause


__all__ = [
    "AlreadyCompleted",
    "HabitCoreError",
    "HabitNotFound",
    "NoCompletionFound",
    "PropagationFailure",
    "ValidationError",
]
