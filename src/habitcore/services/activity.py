"""Activity feed sink backed by an activity repository."""

from __future__ import annotations

from ..domain.repositories.activity import ActivityRepository
from ..logging_config import get_logger
from ..models.activity import Activity
from ..utils.dates import Clock, system_clock
from .effects import ActivityEvent

logger = get_logger("services.activity")


class ActivityLog:
    """Persists published ``ActivityEvent`` messages as ``Activity`` rows."""

    def __init__(self, repository: ActivityRepository, *, clock: Clock = system_clock) -> None:
        self.repository = repository
        self.clock = clock

    def emit(self, event: ActivityEvent) -> None:
        activity = Activity(
            owner_id=event.owner_id,
            team_id=event.team_id,
            action=event.action,
            target_type=event.target_type,
            target_id=event.target_id,
            details=dict(event.details),
            timestamp=self.clock(),
        )
        self.repository.add(activity)
        logger.info(
            "Activity recorded",
            extra={"action": event.action, "owner_id": event.owner_id, "target_id": event.target_id},
        )


__all__ = ["ActivityLog"]
