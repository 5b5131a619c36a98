"""Outbound side effects published after a habit has been persisted.

Goal progress and activity events are best effort. The dispatcher delivers
each effect to its handler in isolation; a failing handler is logged and
recorded, and never reaches the caller of the habit operation.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Any, Deque, Optional, Protocol, Union

from ..errors import PropagationFailure
from ..logging_config import get_logger

logger = get_logger("services.effects")

MAX_RECORDED_FAILURES = 100


@dataclass(frozen=True)
class GoalProgressDelta:
    """Apply ``delta`` to ``goal_id`` on behalf of ``habit_id``."""

    owner_id: int
    habit_id: int
    goal_id: int
    delta: int


@dataclass(frozen=True)
class ActivityEvent:
    """A feed entry such as ``habit_completed`` or ``habit_streak_milestone``."""

    owner_id: int
    action: str
    target_type: str
    target_id: Optional[int] = None
    team_id: Optional[int] = None
    details: dict[str, Any] = field(default_factory=dict)


Effect = Union[GoalProgressDelta, ActivityEvent]


class GoalProgressPropagator(Protocol):
    """Applies one discrete habit delta to a linked goal."""

    def propagate(
        self, owner_id: int, habit_id: int, delta: int, *, goal_id: Optional[int] = None
    ) -> None:
        """Apply ``delta`` to ``goal_id``, or to every active goal linking the habit."""
        ...


class ActivitySink(Protocol):
    """Fire-and-forget activity log."""

    def emit(self, event: ActivityEvent) -> None:
        ...


class EffectDispatcher:
    """Routes published effects to the configured collaborators."""

    def __init__(
        self,
        *,
        goal_propagator: Optional[GoalProgressPropagator] = None,
        activity_sink: Optional[ActivitySink] = None,
        max_failures: int = MAX_RECORDED_FAILURES,
    ) -> None:
        self.goal_propagator = goal_propagator
        self.activity_sink = activity_sink
        # Most recent failures only; older ones are still in the log.
        self.failures: Deque[PropagationFailure] = deque(maxlen=max_failures)

    def publish(self, effect: Effect) -> bool:
        """Deliver one effect; returns False if it was dropped or failed."""

        try:
            if isinstance(effect, GoalProgressDelta):
                if self.goal_propagator is None:
                    return False
                self.goal_propagator.propagate(
                    effect.owner_id, effect.habit_id, effect.delta, goal_id=effect.goal_id
                )
            elif isinstance(effect, ActivityEvent):
                if self.activity_sink is None:
                    return False
                self.activity_sink.emit(effect)
            else:
                raise TypeError(f"Unsupported effect: {type(effect).__name__}")
        except Exception as exc:  # noqa: BLE001 - effects must not fail the caller
            failure = PropagationFailure(effect, exc)
            self.failures.append(failure)
            logger.exception(
                "Side effect failed",
                extra={"effect": type(effect).__name__, "owner_id": getattr(effect, "owner_id", None)},
            )
            return False
        return True

    def publish_all(self, effects: list[Effect]) -> int:
        """Publish effects in order; returns how many were delivered."""

        return sum(1 for effect in effects if self.publish(effect))

    def drain_failures(self) -> list[PropagationFailure]:
        """Return and forget the recorded failures."""

        drained = list(self.failures)
        self.failures.clear()
        return drained


__all__ = [
    "ActivityEvent",
    "ActivitySink",
    "Effect",
    "EffectDispatcher",
    "GoalProgressDelta",
    "GoalProgressPropagator",
]
