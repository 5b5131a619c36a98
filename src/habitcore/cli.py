"""Command line entry points for inspecting and repairing habits."""

from __future__ import annotations

import json
from datetime import date
from typing import Any

import click

from .config import BaseConfig
from .context import AppContext, create_app_context
from .errors import HabitCoreError
from .logging_config import setup_logging
from .models.habit import Habit, HabitFrequency
from .services import habits as habit_service
from .services.stats import get_habit_calendar, get_habit_stats


def _habit_summary(habit: Habit) -> dict[str, Any]:
    return {
        "id": habit.id,
        "name": habit.name,
        "frequency": habit.frequency,
        "grace_days": habit.grace_days,
        "grace_days_used": habit.grace_days_used,
        "current_streak": habit.current_streak,
        "longest_streak": habit.longest_streak,
        "last_completed_date": habit.last_completed_date,
        "total_completions": habit.total_completions,
        "success_rate": round(habit.success_rate, 2),
        "is_active": habit.is_active,
    }


def _echo_json(payload: Any) -> None:
    click.echo(json.dumps(payload, indent=2, default=str))


def _run(fn, *args, **kwargs):
    """Translate domain errors into a one-line message and exit status 1."""
    try:
        return fn(*args, **kwargs)
    except HabitCoreError as exc:
        raise click.ClickException(exc.message) from exc


owner_option = click.option("--owner", "owner_id", type=int, required=True, help="Owner user id")


@click.group()
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Habit completion and streak engine."""

    if ctx.obj is None:
        config = BaseConfig()
        setup_logging(config)
        ctx.obj = create_app_context(config)


@cli.command("init-db")
@click.pass_obj
def init_db(app: AppContext) -> None:
    """Create the database schema (idempotent)."""

    click.echo(f"Database ready: {app.config.DATABASE_URL}")


@cli.command("create")
@click.argument("name")
@owner_option
@click.option(
    "--frequency",
    type=click.Choice([f.value for f in HabitFrequency]),
    default=HabitFrequency.DAILY.value,
    show_default=True,
)
@click.option("--grace-days", type=int, default=None, help="Missed days tolerated")
@click.option("--goal", "goals", type=int, multiple=True, help="Linked goal id (repeatable)")
@click.pass_obj
def create(app: AppContext, name: str, owner_id: int, frequency: str, grace_days, goals) -> None:
    """Create a habit."""

    habit = _run(
        habit_service.create_habit,
        app.habit_repo,
        owner_id=owner_id,
        name=name,
        frequency=frequency,
        grace_days=grace_days,
        linked_goals=goals,
        now=app.clock(),
        default_grace_days=app.config.DEFAULT_GRACE_DAYS,
    )
    _echo_json(_habit_summary(habit))


@cli.command("list")
@owner_option
@click.option("--all", "include_inactive", is_flag=True, help="Include soft-deleted habits")
@click.pass_obj
def list_command(app: AppContext, owner_id: int, include_inactive: bool) -> None:
    """List an owner's habits."""

    habits = habit_service.list_habits(
        app.habit_repo, owner_id=owner_id, include_inactive=include_inactive
    )
    _echo_json([_habit_summary(habit) for habit in habits])


@cli.command("complete")
@click.argument("habit_id", type=int)
@owner_option
@click.option("--date", "on", type=click.DateTime(formats=["%Y-%m-%d"]), default=None)
@click.option("--notes", default=None)
@click.pass_obj
def complete(app: AppContext, habit_id: int, owner_id: int, on, notes) -> None:
    """Mark a day (default today) as completed."""

    habit = _run(app.completion.complete, habit_id, owner_id=owner_id, on=on, notes=notes)
    _echo_json(_habit_summary(habit))


@cli.command("uncomplete")
@click.argument("habit_id", type=int)
@owner_option
@click.option("--date", "on", type=click.DateTime(formats=["%Y-%m-%d"]), required=True)
@click.pass_obj
def uncomplete(app: AppContext, habit_id: int, owner_id: int, on) -> None:
    """Undo a day's completion."""

    habit = _run(app.completion.uncomplete, habit_id, owner_id=owner_id, on=on)
    _echo_json(_habit_summary(habit))


@cli.command("recompute")
@click.argument("habit_id", type=int)
@owner_option
@click.option(
    "--rebuild-longest",
    is_flag=True,
    help="Also rebuild the longest streak from history (may lower it)",
)
@click.pass_obj
def recompute(app: AppContext, habit_id: int, owner_id: int, rebuild_longest: bool) -> None:
    """Rebuild cached streak counters from the completion history."""

    habit = _run(
        app.completion.recompute, habit_id, owner_id=owner_id, rebuild_longest=rebuild_longest
    )
    _echo_json(_habit_summary(habit))


@cli.command("stats")
@click.argument("habit_id", type=int)
@owner_option
@click.pass_obj
def stats(app: AppContext, habit_id: int, owner_id: int) -> None:
    """Show streaks, success rate, and recent activity counts."""

    result = _run(
        get_habit_stats,
        app.habit_repo,
        habit_id,
        owner_id=owner_id,
        now=app.clock(),
        history_limit=app.config.HISTORY_LIMIT,
    )
    _echo_json(result.to_dict())


@cli.command("calendar")
@click.argument("habit_id", type=int)
@owner_option
@click.option("--year", type=int, default=None)
@click.option("--month", type=click.IntRange(1, 12), default=None)
@click.pass_obj
def calendar(app: AppContext, habit_id: int, owner_id: int, year, month) -> None:
    """Show one month of completion flags (default: current month)."""

    today: date = app.clock().date()
    result = _run(
        get_habit_calendar,
        app.habit_repo,
        habit_id,
        owner_id=owner_id,
        year=year or today.year,
        month=month or today.month,
    )
    _echo_json(result.to_dict())


def main() -> None:  # pragma: no cover - console script
    cli()


__all__ = ["cli", "main"]
