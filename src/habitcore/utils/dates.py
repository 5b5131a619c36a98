"""Day-granularity date helpers and the injectable clock."""

from __future__ import annotations

import calendar
from datetime import date, datetime, time
from typing import Callable, Union

Clock = Callable[[], datetime]
DayLike = Union[date, datetime, str]


def system_clock() -> datetime:
    """Local wall-clock time; the default clock for services."""

    return datetime.now()


def as_day(value: DayLike) -> date:
    """Normalize a date, datetime, or ISO string to its local calendar day."""

    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone()
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return date.fromisoformat(text[:10])
        except ValueError as exc:
            raise ValueError(f"Invalid date: {value!r}") from exc
    raise TypeError(f"Cannot interpret {type(value).__name__} as a day")


def midnight(day: date) -> datetime:
    return datetime.combine(day, time.min)


def days_between(later: date, earlier: date) -> int:
    """Whole days from ``earlier`` to ``later`` (negative when reversed)."""

    return (later - earlier).days


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """First and last day of a calendar month."""

    if not 1 <= month <= 12:
        raise ValueError(f"Month must be between 1 and 12, got {month}")
    last = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last)


__all__ = ["Clock", "DayLike", "as_day", "days_between", "midnight", "month_bounds", "system_clock"]
