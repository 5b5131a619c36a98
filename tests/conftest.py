"""Pytest configuration and shared fixtures for habitcore tests.

This module provides database fixtures, test data factories, a controllable
clock, and recording side-effect sinks for testing the streak engine without
touching a real application database.
"""

from __future__ import annotations

import tempfile
from datetime import datetime, timedelta
from pathlib import Path
from typing import Iterable, Optional

import pytest
from sqlmodel import Session, SQLModel, create_engine

# Import all models to ensure they're registered with SQLModel metadata
from habitcore.models import Activity, Goal, Habit  # noqa: F401
from habitcore.infra.repositories import (
    SQLModelActivityRepository,
    SQLModelGoalRepository,
    SQLModelHabitRepository,
)
from habitcore.services.completion import CompletionService
from habitcore.services.effects import ActivityEvent, EffectDispatcher

OWNER_ID = 1
OTHER_OWNER_ID = 2


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(scope="function")
def db_engine():
    """Create an isolated SQLite database for each test.

    Yields:
        Engine: SQLModel engine connected to test database
    """
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    engine = create_engine(f"sqlite:///{db_path}", echo=False)
    SQLModel.metadata.create_all(engine)

    yield engine

    engine.dispose()
    db_path.unlink(missing_ok=True)


@pytest.fixture(scope="function")
def db_session(db_engine):
    """Session for arranging data directly in a test."""
    session = Session(db_engine, expire_on_commit=False)
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


@pytest.fixture(scope="function")
def session_factory(db_engine):
    """Session factory matching what the repositories expect."""

    def factory():
        return Session(db_engine, expire_on_commit=False)

    return factory


@pytest.fixture
def habit_repo(session_factory) -> SQLModelHabitRepository:
    return SQLModelHabitRepository(session_factory)


@pytest.fixture
def goal_repo(session_factory) -> SQLModelGoalRepository:
    return SQLModelGoalRepository(session_factory)


@pytest.fixture
def activity_repo(session_factory) -> SQLModelActivityRepository:
    return SQLModelActivityRepository(session_factory)


# =============================================================================
# Clock and side-effect fakes
# =============================================================================


class FixedClock:
    """Callable clock whose current time tests move explicitly."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, days: int = 0, hours: int = 0) -> None:
        self.now += timedelta(days=days, hours=hours)


class RecordingPropagator:
    """Goal propagator fake that records calls and can be told to fail."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.calls: list[tuple[int, int, Optional[int], int]] = []

    def propagate(self, owner_id, habit_id, delta, *, goal_id=None):
        self.calls.append((owner_id, habit_id, goal_id, delta))
        if self.fail:
            raise RuntimeError("goals service unavailable")


class RecordingActivitySink:
    """Activity sink fake that keeps emitted events in memory."""

    def __init__(self):
        self.events: list[ActivityEvent] = []

    def emit(self, event: ActivityEvent) -> None:
        self.events.append(event)

    def actions(self) -> list[str]:
        return [event.action for event in self.events]


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(datetime(2025, 1, 1, 9, 0))


@pytest.fixture
def propagator() -> RecordingPropagator:
    return RecordingPropagator()


@pytest.fixture
def activity_sink() -> RecordingActivitySink:
    return RecordingActivitySink()


@pytest.fixture
def dispatcher(propagator, activity_sink) -> EffectDispatcher:
    return EffectDispatcher(goal_propagator=propagator, activity_sink=activity_sink)


@pytest.fixture
def completion_service(habit_repo, dispatcher, clock) -> CompletionService:
    return CompletionService(habit_repo, dispatcher=dispatcher, clock=clock)


# =============================================================================
# Test Data Factories
# =============================================================================


@pytest.fixture
def habit_factory(habit_repo):
    """Factory for creating persisted habits.

    Returns:
        Callable: Function that creates and persists Habit instances
    """

    def _create_habit(
        name: str = "Meditate",
        *,
        owner_id: int = OWNER_ID,
        grace_days: int = 0,
        created_at: datetime = datetime(2025, 1, 1),
        linked_goals: Iterable[int] = (),
        team_id: Optional[int] = None,
        is_active: bool = True,
    ) -> Habit:
        habit = Habit(
            owner_id=owner_id,
            team_id=team_id,
            name=name,
            frequency="daily",
            grace_days=grace_days,
            linked_goals=list(linked_goals),
            created_at=created_at,
            is_active=is_active,
        )
        return habit_repo.create(habit)

    return _create_habit


@pytest.fixture
def goal_factory(goal_repo):
    """Factory for creating persisted goals."""

    def _create_goal(
        title: str = "Meditate 30 times",
        *,
        owner_id: int = OWNER_ID,
        goal_type: str = "count",
        target_value: float = 30,
        linked_habits: Iterable[int] = (),
        milestones: Iterable[dict] = (),
        status: str = "active",
    ) -> Goal:
        goal = Goal(
            owner_id=owner_id,
            title=title,
            goal_type=goal_type,
            target_value=target_value,
            linked_habits=list(linked_habits),
            milestones=list(milestones),
            status=status,
        )
        return goal_repo.create(goal)

    return _create_goal
