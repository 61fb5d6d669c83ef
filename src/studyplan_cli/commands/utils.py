"""Helpers shared by the command modules."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import date, datetime

from studyplan_cli.models import SchoolClass, TaskType
from studyplan_cli.services.context_manager import PlannerContext, get_planner_context
from studyplan_cli.utils import exit_codes

from .decorators import AppError


@asynccontextmanager
async def planner_session() -> AsyncIterator[PlannerContext]:
    """Yield the planner context and close its HTTP client afterwards."""
    ctx = get_planner_context()
    try:
        yield ctx
    finally:
        await ctx.close()


def parse_date(value: str | None, option: str = "--date") -> date | None:
    """Parse a ``YYYY-MM-DD`` option value."""
    if value is None:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        raise AppError(
            f"Invalid {option} '{value}', expected YYYY-MM-DD",
            exit_codes.ERROR_INVALID_ARGS,
        ) from e


def parse_time(value: str, option: str = "--time") -> str:
    """Normalize an ``HH:MM`` option value ("9:05" -> "09:05")."""
    try:
        parsed = datetime.strptime(value.strip(), "%H:%M")
    except ValueError as e:
        raise AppError(
            f"Invalid {option} '{value}', expected HH:MM",
            exit_codes.ERROR_INVALID_ARGS,
        ) from e
    return parsed.strftime("%H:%M")


def find_by_ref(items: list[SchoolClass] | list[TaskType], ref: str, kind: str):
    """Find a class or task type by id, falling back to a case-insensitive name."""
    for item in items:
        if item.id == ref:
            return item
    matches = [item for item in items if item.name.lower() == ref.lower()]
    if len(matches) == 1:
        return matches[0]
    if len(matches) > 1:
        raise AppError(
            f"Several {kind}s are named '{ref}', use the id instead",
            exit_codes.ERROR_INVALID_ARGS,
        )
    raise AppError(f"{kind.capitalize()} '{ref}' not found", exit_codes.ERROR_NOT_FOUND)
