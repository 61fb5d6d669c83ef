"""Calendar views of the planner."""

from datetime import date

from rich.table import Table

from studyplan_cli.models import Task
from studyplan_cli.services.calendar_service import (
    format_time_for_display,
    month_grid,
    shift_period,
    sort_for_display,
    tasks_by_day,
    tasks_for_day,
    week_days,
)
from studyplan_cli.services.context_manager import get_planner_context
from studyplan_cli.utils import exit_codes
from studyplan_cli.utils.ui.console import get_console
from studyplan_cli.utils.ui.formatters import format_output

from .decorators import AppError, command_wrapper
from .utils import parse_date, planner_session

console = get_console()

VIEWS = ("month", "week", "day")
WEEKDAY_NAMES = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")
MAX_CELL_TASKS = 3


def _task_line(task: Task) -> str:
    time_label = format_time_for_display(task.display_time)
    return f"{time_label} {task.title}".strip()


def _day_cell(day: date, tasks: list[Task], today: date) -> str:
    header = f"[bold reverse]{day.day}[/bold reverse]" if day == today else f"[bold]{day.day}[/bold]"
    lines = [header]
    ordered = sort_for_display(tasks)
    for task in ordered[:MAX_CELL_TASKS]:
        lines.append(f"[cyan]{_task_line(task)}[/cyan]")
    if len(ordered) > MAX_CELL_TASKS:
        lines.append(f"[dim]+{len(ordered) - MAX_CELL_TASKS} more[/dim]")
    return "\n".join(lines)


def render_month(title: str, anchor: date, tasks: list[Task], today: date) -> Table:
    weeks = month_grid(anchor.year, anchor.month)
    days = [day for week in weeks for day in week if day is not None]
    by_day = tasks_by_day(tasks, days)

    table = Table(
        title=f"{title} · {anchor.strftime('%B %Y')}",
        show_header=True,
        header_style="bold magenta",
        show_lines=True,
    )
    for name in WEEKDAY_NAMES:
        table.add_column(name, vertical="top", ratio=1)
    for week in weeks:
        table.add_row(*("" if day is None else _day_cell(day, by_day[day], today) for day in week))
    return table


def render_week(title: str, anchor: date, tasks: list[Task], today: date) -> Table:
    days = week_days(anchor)
    by_day = tasks_by_day(tasks, days)

    table = Table(
        title=f"{title} · {days[0].strftime('%b %d')} – {days[-1].strftime('%b %d, %Y')}",
        show_header=True,
        header_style="bold magenta",
    )
    for name, day in zip(WEEKDAY_NAMES, days):
        table.add_column(f"{name} {day.day}", vertical="top", ratio=1)
    cells = []
    for day in days:
        lines = [f"[cyan]{_task_line(t)}[/cyan]" for t in sort_for_display(by_day[day])]
        if day == today:
            lines.insert(0, "[bold reverse]today[/bold reverse]")
        cells.append("\n".join(lines))
    table.add_row(*cells)
    return table


def render_day(title: str, day: date, tasks: list[Task], class_names: dict[str, str]) -> Table:
    table = Table(
        title=f"{title} · {day.strftime('%A, %B %d, %Y')}",
        show_header=True,
        header_style="bold magenta",
    )
    table.add_column("Time", style="cyan", no_wrap=True)
    table.add_column("Task")
    table.add_column("Class", style="green")
    for task in sort_for_display(tasks_for_day(tasks, day)):
        table.add_row(
            format_time_for_display(task.display_time) or "-",
            task.title,
            class_names.get(task.class_id, task.class_id) or "-",
        )
    return table


@command_wrapper
async def show_calendar(view: str, on: str | None, offset: int, output: str) -> None:
    """Render the planner as a month, week or day view."""
    if view not in VIEWS:
        raise AppError(
            f"Unknown view '{view}'. Expected one of: {', '.join(VIEWS)}",
            exit_codes.ERROR_INVALID_ARGS,
        )
    today = date.today()
    anchor = shift_period(parse_date(on) or today, view, offset)

    async with planner_session() as ctx:
        tasks = await ctx.data_service.get_tasks(ctx.use_remote)
        classes = await ctx.data_service.get_classes(ctx.use_remote)
    title = ctx.data_service.get_settings().title

    if output != "pretty":
        if view == "month":
            days = [d for week in month_grid(anchor.year, anchor.month) for d in week if d]
        elif view == "week":
            days = week_days(anchor)
        else:
            days = [anchor]
        format_output(
            {
                day.isoformat(): [t.model_dump(exclude_none=True) for t in day_tasks]
                for day, day_tasks in tasks_by_day(tasks, days).items()
            },
            output,
        )
        return

    if view == "month":
        console.print(render_month(title, anchor, tasks, today))
    elif view == "week":
        console.print(render_week(title, anchor, tasks, today))
    else:
        console.print(render_day(title, anchor, tasks, {c.id: c.name for c in classes}))


@command_wrapper
def set_title(title: str | None) -> None:
    """Show or change the planner title shown above the calendar."""
    data_service = get_planner_context().data_service
    if title is None:
        console.print(data_service.get_settings().title)
        return
    if not title.strip():
        raise AppError("Title cannot be empty", exit_codes.ERROR_INVALID_ARGS)
    settings = data_service.update_settings(title=title.strip())
    console.print(f"[green]✓ Title set to {settings.title}[/green]")
