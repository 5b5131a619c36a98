"""SQLModel implementation of the activity log."""

from __future__ import annotations

from typing import Callable, ContextManager, Optional

from sqlmodel import Session, select

from ...models.activity import Activity


class SQLModelActivityRepository:
    """Append-only activity storage."""

    def __init__(self, session_factory: Callable[[], ContextManager[Session]]):
        self.session_factory = session_factory

    def add(self, activity: Activity) -> Activity:
        with self.session_factory() as session:
            session.add(activity)
            session.commit()
            session.refresh(activity)
            session.expunge(activity)
            return activity

    def list_for_owner(self, *, owner_id: int, limit: int = 100) -> list[Activity]:
        with self.session_factory() as session:
            statement = (
                select(Activity)
                .where(Activity.owner_id == owner_id)
                .order_by(Activity.timestamp.desc(), Activity.id.desc())  # type: ignore
                .limit(limit)
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def list_for_team(self, *, team_id: int, limit: Optional[int] = 50) -> list[Activity]:
        with self.session_factory() as session:
            statement = (
                select(Activity)
                .where(Activity.team_id == team_id)
                .order_by(Activity.timestamp.desc(), Activity.id.desc())  # type: ignore
            )
            if limit is not None:
                statement = statement.limit(limit)
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows


__all__ = ["SQLModelActivityRepository"]
