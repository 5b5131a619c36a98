"""Goals that habits can feed progress into."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, ClassVar, Iterable, Optional

from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel


class GoalType(str, Enum):
    FINANCIAL = "financial"
    TIME = "time"
    COUNT = "count"
    BINARY = "binary"


class GoalStatus(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    ARCHIVED = "archived"


class GoalMilestone(SQLModel):
    """Intermediate target on the way to a goal's target value."""

    title: str
    target_value: float
    completed: bool = False
    completed_at: Optional[datetime] = None


class Goal(SQLModel, table=True):
    """A measurable goal; ``linked_habits`` lists habits that advance it."""

    __tablename__: ClassVar[str] = "goal"

    id: Optional[int] = Field(default=None, primary_key=True)
    owner_id: int = Field(nullable=False, index=True)
    team_id: Optional[int] = Field(default=None, index=True)
    title: str = Field(nullable=False, max_length=120)
    description: str = Field(default="", max_length=500)
    goal_type: str = Field(default=GoalType.COUNT.value, max_length=16)
    status: str = Field(default=GoalStatus.ACTIVE.value, max_length=16, index=True)

    target_value: float = Field(default=0.0, nullable=False)
    current_value: float = Field(default=0.0, nullable=False)
    unit: str = Field(default="", max_length=16)

    milestones: list[dict[str, Any]] = Field(
        default_factory=list, sa_column=Column(JSON, nullable=False)
    )
    linked_habits: list[int] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))

    completed_at: Optional[datetime] = Field(default=None)
    created_at: datetime = Field(default_factory=datetime.now, nullable=False)

    def milestone_entries(self) -> list[GoalMilestone]:
        return [GoalMilestone.model_validate(raw) for raw in self.milestones or []]

    def set_milestone_entries(self, entries: Iterable[GoalMilestone]) -> None:
        self.milestones = [entry.model_dump(mode="json") for entry in entries]


__all__ = ["Goal", "GoalMilestone", "GoalStatus", "GoalType"]
