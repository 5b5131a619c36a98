"""Activity log protocol."""

from __future__ import annotations

from typing import Optional, Protocol

from ...models.activity import Activity


class ActivityRepository(Protocol):
    """Append-only store for feed events."""

    def add(self, activity: Activity) -> Activity:
        """Persist one event."""
        ...

    def list_for_owner(self, *, owner_id: int, limit: int = 100) -> list[Activity]:
        """Most recent events for an owner, newest first."""
        ...

    def list_for_team(self, *, team_id: int, limit: Optional[int] = 50) -> list[Activity]:
        """Most recent events for a team, newest first."""
        ...
