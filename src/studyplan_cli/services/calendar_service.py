"""Calendar service - which tasks render on which calendar day.

A task is matched against a day by exactly one rule, tried in order:

1. Deadline: ``due_date`` equals the day (plain ``YYYY-MM-DD`` string equality,
   so no timezone conversion can shift it).
2. Legacy: only when there is no ``due_date``; the local calendar date of the
   ``date`` timestamp equals the day.
3. Span: duration tasks with both ``start_date`` and ``end_date`` cover every
   day of the inclusive range (zero-padded ISO dates compare correctly as
   strings).

Tasks matching none of the rules are not shown on any day.
"""

from __future__ import annotations

import calendar
from collections.abc import Iterable
from datetime import UTC, date, datetime, timedelta
from enum import Enum
from typing import Literal

from studyplan_cli.models import Task
from studyplan_cli.utils.logger import get_logger

logger = get_logger("calendar")

View = Literal["month", "week", "day"]


class DayMatch(str, Enum):
    """Rule that placed a task on a day."""

    DUE = "due"
    LEGACY = "legacy"
    SPAN = "span"


def to_date_string(target: date | str) -> str:
    """Format a calendar day as ``YYYY-MM-DD``."""
    if isinstance(target, datetime):
        target = target.date()
    if isinstance(target, date):
        return target.isoformat()
    return date.fromisoformat(target).isoformat()


def legacy_local_date(timestamp: str) -> date | None:
    """Local calendar date of a legacy ``date`` timestamp.

    Follows how the stored timestamps were produced and read by the web
    planner: a bare ``YYYY-MM-DD`` means UTC midnight, a date-time without an
    offset is local time, and anything with an offset is converted to local
    time.

    Returns:
        The local date, or None when the timestamp cannot be parsed
    """
    value = timestamp.strip()
    try:
        if len(value) == 10:
            parsed = datetime.combine(date.fromisoformat(value), datetime.min.time(), UTC)
        else:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None

    if parsed.tzinfo is None:
        return parsed.date()
    return parsed.astimezone().date()


def classify_task(task: Task, target: date | str) -> DayMatch | None:
    """Return the rule placing ``task`` on ``target``, or None."""
    target_str = to_date_string(target)

    if task.due_date:
        if task.due_date == target_str:
            return DayMatch.DUE
    elif task.date:
        local_day = legacy_local_date(task.date)
        if local_day is None:
            logger.debug("task %s has unparseable date %r", task.id, task.date)
        elif local_day.isoformat() == target_str:
            return DayMatch.LEGACY

    if task.is_duration and task.start_date and task.end_date:
        if task.start_date <= target_str <= task.end_date:
            return DayMatch.SPAN

    return None


def tasks_for_day(all_tasks: Iterable[Task], target: date | str) -> list[Task]:
    """Tasks that render on ``target``, in input order.

    A task id is returned at most once, even when the input repeats it.
    """
    target_str = to_date_string(target)
    matched_ids: set[str] = set()
    result = []
    for task in all_tasks:
        if task.id in matched_ids:
            continue
        if classify_task(task, target_str) is not None:
            matched_ids.add(task.id)
            result.append(task)
    return result


def tasks_by_day(all_tasks: Iterable[Task], days: Iterable[date]) -> dict[date, list[Task]]:
    """Run ``tasks_for_day`` for each day of a view."""
    tasks = list(all_tasks)
    return {day: tasks_for_day(tasks, day) for day in days}


# ---------------------------------------------------------------------------
# View helpers
# ---------------------------------------------------------------------------

_SUNDAY_FIRST = calendar.Calendar(firstweekday=calendar.SUNDAY)


def month_grid(year: int, month: int) -> list[list[date | None]]:
    """Weeks of a month, Sunday first; days outside the month are None."""
    weeks = []
    for week in _SUNDAY_FIRST.monthdatescalendar(year, month):
        weeks.append([day if day.month == month else None for day in week])
    return weeks


def week_days(anchor: date) -> list[date]:
    """The Sunday-first week containing ``anchor``."""
    start = anchor - timedelta(days=(anchor.weekday() + 1) % 7)
    return [start + timedelta(days=offset) for offset in range(7)]


def shift_period(anchor: date, view: View, step: int) -> date:
    """Move ``anchor`` by ``step`` months, weeks or days."""
    if view == "day":
        return anchor + timedelta(days=step)
    if view == "week":
        return anchor + timedelta(weeks=step)

    month_index = anchor.year * 12 + anchor.month - 1 + step
    year, month = divmod(month_index, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return anchor.replace(year=year, month=month, day=min(anchor.day, last_day))


def format_time_for_display(time_string: str | None) -> str:
    """Format ``HH:MM`` as a 12-hour clock time ("13:05" -> "1:05 PM").

    Anything else is returned unchanged.
    """
    if not time_string:
        return ""
    hours, _, minutes = time_string.partition(":")
    if not (hours.isdigit() and minutes):
        return time_string
    hour = int(hours)
    suffix = "PM" if hour >= 12 else "AM"
    display_hour = hour % 12 or 12
    return f"{display_hour}:{minutes} {suffix}"


def sort_for_display(tasks: Iterable[Task]) -> list[Task]:
    """Order a day's tasks by time of day; untimed tasks go last."""
    return sorted(tasks, key=lambda task: (task.display_time is None, task.display_time or ""))
