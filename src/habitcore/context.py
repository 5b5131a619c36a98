"""Application context for dependency injection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .config import BaseConfig
from .infra.database import SessionFactory, bootstrap_database
from .infra.repositories import (
    SQLModelActivityRepository,
    SQLModelGoalRepository,
    SQLModelHabitRepository,
)
from .services.activity import ActivityLog
from .services.completion import CompletionService
from .services.effects import EffectDispatcher
from .services.goals import HabitGoalPropagator
from .utils.dates import Clock, system_clock


@dataclass
class AppContext:
    """Repositories and services wired against one database."""

    config: BaseConfig
    session_factory: SessionFactory
    clock: Clock

    habit_repo: SQLModelHabitRepository
    goal_repo: SQLModelGoalRepository
    activity_repo: SQLModelActivityRepository

    dispatcher: EffectDispatcher
    completion: CompletionService


def create_app_context(config: Optional[BaseConfig] = None, *, clock: Clock = system_clock) -> AppContext:
    """Create the engine, schema, repositories, and services."""

    if config is None:
        config = BaseConfig()

    _, session_factory = bootstrap_database(config)

    habit_repo = SQLModelHabitRepository(session_factory)
    goal_repo = SQLModelGoalRepository(session_factory)
    activity_repo = SQLModelActivityRepository(session_factory)

    activity_log = ActivityLog(activity_repo, clock=clock)
    dispatcher = EffectDispatcher(
        goal_propagator=HabitGoalPropagator(goal_repo, activity_sink=activity_log, clock=clock),
        activity_sink=activity_log,
    )
    completion = CompletionService(habit_repo, dispatcher=dispatcher, clock=clock, config=config)

    return AppContext(
        config=config,
        session_factory=session_factory,
        clock=clock,
        habit_repo=habit_repo,
        goal_repo=goal_repo,
        activity_repo=activity_repo,
        dispatcher=dispatcher,
        completion=completion,
    )


__all__ = ["AppContext", "create_app_context"]
