"""SQLModel implementation of Goal repository."""

from __future__ import annotations

from typing import Callable, ContextManager, Optional

from sqlalchemy.orm.attributes import flag_modified
from sqlmodel import Session, select

from ...models.goal import Goal, GoalStatus


class SQLModelGoalRepository:
    """SQLModel-based goal repository implementation."""

    def __init__(self, session_factory: Callable[[], ContextManager[Session]]):
        self.session_factory = session_factory

    def get_by_id(self, goal_id: int, *, owner_id: int) -> Optional[Goal]:
        with self.session_factory() as session:
            obj = session.exec(
                select(Goal).where(Goal.id == goal_id, Goal.owner_id == owner_id)
            ).first()
            if obj:
                session.expunge(obj)
            return obj

    def list_active_for_habit(self, habit_id: int, *, owner_id: int) -> list[Goal]:
        """Active goals linking the habit; JSON membership is checked in Python."""
        with self.session_factory() as session:
            statement = select(Goal).where(
                Goal.owner_id == owner_id,
                Goal.status == GoalStatus.ACTIVE.value,
            )
            rows = [goal for goal in session.exec(statement).all() if habit_id in (goal.linked_habits or [])]
            session.expunge_all()
            return rows

    def create(self, goal: Goal) -> Goal:
        with self.session_factory() as session:
            session.add(goal)
            session.commit()
            session.refresh(goal)
            session.expunge(goal)
            return goal

    def save(self, goal: Goal) -> Goal:
        with self.session_factory() as session:
            merged = session.merge(goal)
            flag_modified(merged, "milestones")
            flag_modified(merged, "linked_habits")
            session.commit()
            session.refresh(merged)
            session.expunge(merged)
            return merged


__all__ = ["SQLModelGoalRepository"]
