"""Habit repository protocol."""

from __future__ import annotations

from typing import Optional, Protocol

from ...models.habit import Habit


class HabitRepository(Protocol):
    """Document-style storage for habits: point read, full replace, owner query."""

    def get_by_id(self, habit_id: int, *, owner_id: int) -> Optional[Habit]:
        """Retrieve a habit only if it belongs to ``owner_id``."""
        ...

    def list_for_owner(
        self,
        *,
        owner_id: int,
        include_inactive: bool = False,
        team_id: Optional[int] = None,
    ) -> list[Habit]:
        """List the owner's habits, plus the team's when ``team_id`` is set."""
        ...

    def create(self, habit: Habit) -> Habit:
        """Insert a new habit and return it with its id assigned."""
        ...

    def save(self, habit: Habit) -> Habit:
        """Replace the stored document with ``habit`` (last writer wins)."""
        ...
