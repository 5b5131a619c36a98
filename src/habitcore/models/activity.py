"""Activity feed entries emitted by habit and goal changes."""

from __future__ import annotations

from datetime import datetime
from typing import Any, ClassVar, Optional

from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel


class Activity(SQLModel, table=True):
    """A single feed event such as ``habit_completed``."""

    __tablename__: ClassVar[str] = "activity"

    id: Optional[int] = Field(default=None, primary_key=True)
    owner_id: int = Field(nullable=False, index=True)
    team_id: Optional[int] = Field(default=None, index=True)
    action: str = Field(nullable=False, max_length=64)
    target_type: str = Field(nullable=False, max_length=32)
    target_id: Optional[int] = Field(default=None)
    details: dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))
    timestamp: datetime = Field(default_factory=datetime.now, nullable=False, index=True)


__all__ = ["Activity"]
