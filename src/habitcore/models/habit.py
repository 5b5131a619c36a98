"""Habit tracking data structures."""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import Any, ClassVar, Iterable, Optional

from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel


class HabitFrequency(str, Enum):
    """How often a habit is meant to be performed (informational only)."""

    DAILY = "daily"
    WEEKLY = "weekly"
    CUSTOM = "custom"


class HabitCompletion(SQLModel):
    """One calendar day in a habit's completion history."""

    day: date
    completed: bool = True
    notes: str = ""


class Habit(SQLModel, table=True):
    """A user-defined habit stored as a single document.

    ``completions`` and ``linked_goals`` live in JSON columns so a habit is
    read and written as one row. The streak counters are a cache over
    ``completions`` and can always be rebuilt from it.
    """

    __tablename__: ClassVar[str] = "habit"

    id: Optional[int] = Field(default=None, primary_key=True)
    owner_id: int = Field(nullable=False, index=True)
    team_id: Optional[int] = Field(default=None, index=True)
    name: str = Field(nullable=False, max_length=120, index=True)
    description: str = Field(default="", max_length=500)
    frequency: str = Field(default=HabitFrequency.DAILY.value, max_length=16)
    times_per_week: Optional[int] = Field(default=None)

    grace_days: int = Field(default=1, nullable=False)
    grace_days_used: int = Field(default=0, nullable=False)
    current_streak: int = Field(default=0, nullable=False)
    longest_streak: int = Field(default=0, nullable=False)
    last_completed_date: Optional[date] = Field(default=None)

    completions: list[dict[str, Any]] = Field(
        default_factory=list, sa_column=Column(JSON, nullable=False)
    )
    total_completions: int = Field(default=0, nullable=False)
    success_rate: float = Field(default=0.0, nullable=False)

    linked_goals: list[int] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))

    is_active: bool = Field(default=True, nullable=False, index=True)
    created_at: datetime = Field(default_factory=datetime.now, nullable=False)
    updated_at: Optional[datetime] = Field(default=None)

    def completion_entries(self) -> list[HabitCompletion]:
        """Parse the stored history into typed entries, oldest first."""

        return [HabitCompletion.model_validate(raw) for raw in self.completions or []]

    def set_completion_entries(self, entries: Iterable[HabitCompletion]) -> None:
        """Replace the stored history; keeps one entry per day sorted by day."""

        by_day = {entry.day: entry for entry in entries}
        ordered = [by_day[day] for day in sorted(by_day)]
        # Reassign rather than mutate so the JSON column is marked dirty.
        self.completions = [entry.model_dump(mode="json") for entry in ordered]

    def entry_for(self, day: date) -> Optional[HabitCompletion]:
        for entry in self.completion_entries():
            if entry.day == day:
                return entry
        return None


__all__ = ["Habit", "HabitCompletion", "HabitFrequency"]
