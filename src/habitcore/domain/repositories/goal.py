"""Goal repository protocol."""

from __future__ import annotations

from typing import Optional, Protocol

from ...models.goal import Goal


class GoalRepository(Protocol):
    """Repository for goals that habits contribute to."""

    def get_by_id(self, goal_id: int, *, owner_id: int) -> Optional[Goal]:
        """Retrieve a goal owned by ``owner_id``."""
        ...

    def list_active_for_habit(self, habit_id: int, *, owner_id: int) -> list[Goal]:
        """Active goals of the owner whose ``linked_habits`` contain ``habit_id``."""
        ...

    def create(self, goal: Goal) -> Goal:
        """Insert a new goal."""
        ...

    def save(self, goal: Goal) -> Goal:
        """Replace the stored goal."""
        ...
