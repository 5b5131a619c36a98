"""SQLModel implementation of Habit repository."""

from __future__ import annotations

from typing import Callable, ContextManager, Optional

from sqlalchemy import or_
from sqlalchemy.orm.attributes import flag_modified
from sqlmodel import Session, select

from ...models.habit import Habit


class SQLModelHabitRepository:
    """SQLModel-based habit repository implementation."""

    def __init__(self, session_factory: Callable[[], ContextManager[Session]]):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def get_by_id(self, habit_id: int, *, owner_id: int) -> Optional[Habit]:
        """Retrieve a habit by ID, scoped to its owner."""
        with self.session_factory() as session:
            obj = session.exec(
                select(Habit).where(Habit.id == habit_id, Habit.owner_id == owner_id)
            ).first()
            if obj:
                session.expunge(obj)
            return obj

    def list_for_owner(
        self,
        *,
        owner_id: int,
        include_inactive: bool = False,
        team_id: Optional[int] = None,
    ) -> list[Habit]:
        """Personal habits of the owner, plus the active team's habits."""
        with self.session_factory() as session:
            personal = (Habit.owner_id == owner_id) & (Habit.team_id == None)  # noqa: E711
            scope = or_(personal, Habit.team_id == team_id) if team_id is not None else personal
            statement = select(Habit).where(scope)

            if not include_inactive:
                statement = statement.where(Habit.is_active == True)  # noqa: E712

            statement = statement.order_by(Habit.created_at.desc(), Habit.id.desc())  # type: ignore
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def create(self, habit: Habit) -> Habit:
        """Create a new habit."""
        with self.session_factory() as session:
            session.add(habit)
            session.commit()
            session.refresh(habit)
            session.expunge(habit)
            return habit

    def save(self, habit: Habit) -> Habit:
        """Write the whole document back; no version check, last writer wins."""
        with self.session_factory() as session:
            merged = session.merge(habit)
            # JSON columns are replaced wholesale; make sure they are flushed.
            flag_modified(merged, "completions")
            flag_modified(merged, "linked_goals")
            session.commit()
            session.refresh(merged)
            session.expunge(merged)
            return merged


__all__ = ["SQLModelHabitRepository"]
