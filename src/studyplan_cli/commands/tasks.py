"""Task management commands."""

from datetime import date

import typer

from studyplan_cli.models import Task, generate_task_id
from studyplan_cli.models.core import DEFAULT_DUE_TIME, DEFAULT_END_TIME, DEFAULT_START_TIME
from studyplan_cli.services.calendar_service import format_time_for_display, tasks_for_day
from studyplan_cli.utils import exit_codes
from studyplan_cli.utils.typer_helpers import SuggestingGroup
from studyplan_cli.utils.ui.formatters import format_error, format_output, format_success

from .decorators import AppError, command_wrapper
from .utils import find_by_ref, parse_date, parse_time, planner_session

app = typer.Typer(cls=SuggestingGroup, help="Task management commands")


def _when(task: Task) -> str:
    if task.is_duration:
        start = f"{task.start_date} {format_time_for_display(task.start_time)}".strip()
        end = f"{task.end_date} {format_time_for_display(task.end_time)}".strip()
        return f"{start} → {end}"
    if task.due_date:
        return f"{task.due_date} {format_time_for_display(task.due_time)}".strip()
    return task.date or ""


def _task_row(task: Task, class_names: dict[str, str], type_names: dict[str, str]) -> dict:
    return {
        "id": task.id,
        "title": task.title,
        "class": class_names.get(task.class_id, task.class_id),
        "type": type_names.get(task.type_id, task.type_id),
        "when": _when(task),
    }


async def _resolve_refs(ctx, class_ref: str | None, type_ref: str | None) -> dict:
    """Map --class/--type references to ids. An empty reference clears the field."""
    changes: dict = {}
    if class_ref is not None:
        if class_ref == "":
            changes["class_id"] = ""
        else:
            classes = await ctx.data_service.get_classes(ctx.use_remote)
            changes["class_id"] = find_by_ref(classes, class_ref, "class").id
    if type_ref is not None:
        if type_ref == "":
            changes["type_id"] = ""
        else:
            task_types = await ctx.data_service.get_task_types(ctx.use_remote)
            changes["type_id"] = find_by_ref(task_types, type_ref, "task type").id
    return changes


def _check_span(start: date | None, end: date | None) -> None:
    if start is None or end is None:
        raise AppError(
            "Duration tasks need both --start and --end", exit_codes.ERROR_INVALID_ARGS
        )
    if end < start:
        raise AppError("--end cannot be before --start", exit_codes.ERROR_INVALID_ARGS)


@app.command("list")
@command_wrapper
async def list_tasks(
    on: str | None = typer.Option(None, "--date", "-d", help="Only tasks shown on this day"),
    class_ref: str | None = typer.Option(None, "--class", "-c", help="Filter by class"),
    type_ref: str | None = typer.Option(None, "--type", "-t", help="Filter by task type"),
    output: str = typer.Option("table", "--output", "-o", help="Output format"),
) -> None:
    """List tasks."""
    day = parse_date(on)
    async with planner_session() as ctx:
        tasks = await ctx.data_service.get_tasks(ctx.use_remote)
        classes = await ctx.data_service.get_classes(ctx.use_remote)
        task_types = await ctx.data_service.get_task_types(ctx.use_remote)

    if day is not None:
        tasks = tasks_for_day(tasks, day)
    if class_ref:
        class_id = find_by_ref(classes, class_ref, "class").id
        tasks = [t for t in tasks if t.class_id == class_id]
    if type_ref:
        type_id = find_by_ref(task_types, type_ref, "task type").id
        tasks = [t for t in tasks if t.type_id == type_id]

    class_names = {c.id: c.name for c in classes}
    type_names = {t.id: t.name for t in task_types}
    format_output([_task_row(t, class_names, type_names) for t in tasks], output)


@app.command("show")
@command_wrapper
async def show_task(
    task_id: str = typer.Argument(..., help="Task id"),
    output: str = typer.Option("table", "--output", "-o", help="Output format"),
) -> None:
    """Show the stored record of a task."""
    async with planner_session() as ctx:
        task = await ctx.data_service.get_task(task_id, ctx.use_remote)
    format_output(task.model_dump(exclude_none=True), output)


@app.command("add")
@command_wrapper
async def add_task(
    title: str = typer.Argument(..., help="Task title"),
    due: str | None = typer.Option(None, "--due", help="Due date (YYYY-MM-DD)"),
    due_time: str = typer.Option(DEFAULT_DUE_TIME, "--due-time", help="Due time (HH:MM)"),
    duration: bool = typer.Option(False, "--duration", help="Task spans several days"),
    start: str | None = typer.Option(None, "--start", help="Start date (YYYY-MM-DD)"),
    start_time: str = typer.Option(DEFAULT_START_TIME, "--start-time", help="Start time"),
    end: str | None = typer.Option(None, "--end", help="End date (YYYY-MM-DD)"),
    end_time: str = typer.Option(DEFAULT_END_TIME, "--end-time", help="End time"),
    class_ref: str | None = typer.Option(None, "--class", "-c", help="Class id or name"),
    type_ref: str | None = typer.Option(None, "--type", "-t", help="Task type id or name"),
) -> None:
    """Create a task.

    Deadline tasks need --due; duration tasks (--duration) need --start and --end.
    """
    if not title.strip():
        raise AppError("Task title cannot be empty", exit_codes.ERROR_INVALID_ARGS)

    fields: dict = {"id": generate_task_id(), "title": title.strip(), "is_duration": duration}
    if duration:
        start_day = parse_date(start, "--start")
        end_day = parse_date(end, "--end")
        _check_span(start_day, end_day)
        fields.update(
            start_date=start_day.isoformat(),
            start_time=parse_time(start_time, "--start-time"),
            end_date=end_day.isoformat(),
            end_time=parse_time(end_time, "--end-time"),
        )
    else:
        due_day = parse_date(due, "--due")
        if due_day is None:
            raise AppError("Deadline tasks need --due", exit_codes.ERROR_INVALID_ARGS)
        fields.update(
            due_date=due_day.isoformat(), due_time=parse_time(due_time, "--due-time")
        )

    async with planner_session() as ctx:
        fields.update(await _resolve_refs(ctx, class_ref, type_ref))
        added = await ctx.data_service.add_task(Task(**fields), ctx.use_remote)
    if added is None:
        raise AppError(f"Failed to add task '{title}'")
    format_success(f"Task created: {added.id}")


@app.command("edit")
@command_wrapper
async def edit_task(
    task_id: str = typer.Argument(..., help="Task id"),
    title: str | None = typer.Option(None, "--title", help="New title"),
    due: str | None = typer.Option(None, "--due", help="Due date (YYYY-MM-DD)"),
    due_time: str | None = typer.Option(None, "--due-time", help="Due time (HH:MM)"),
    duration: bool | None = typer.Option(
        None, "--duration/--deadline", help="Switch between duration and deadline"
    ),
    start: str | None = typer.Option(None, "--start", help="Start date (YYYY-MM-DD)"),
    start_time: str | None = typer.Option(None, "--start-time", help="Start time"),
    end: str | None = typer.Option(None, "--end", help="End date (YYYY-MM-DD)"),
    end_time: str | None = typer.Option(None, "--end-time", help="End time"),
    class_ref: str | None = typer.Option(
        None, "--class", "-c", help="Class id or name ('' to clear)"
    ),
    type_ref: str | None = typer.Option(
        None, "--type", "-t", help="Task type id or name ('' to clear)"
    ),
) -> None:
    """Edit a task. Only the given fields change."""
    changes: dict = {}
    if title is not None:
        changes["title"] = title.strip()
    if duration is not None:
        changes["is_duration"] = duration
    if due is not None:
        changes["due_date"] = parse_date(due, "--due").isoformat()
    if due_time is not None:
        changes["due_time"] = parse_time(due_time, "--due-time")
    if start is not None:
        changes["start_date"] = parse_date(start, "--start").isoformat()
    if start_time is not None:
        changes["start_time"] = parse_time(start_time, "--start-time")
    if end is not None:
        changes["end_date"] = parse_date(end, "--end").isoformat()
    if end_time is not None:
        changes["end_time"] = parse_time(end_time, "--end-time")

    if not changes and class_ref is None and type_ref is None:
        raise AppError("No updates specified", exit_codes.ERROR_INVALID_ARGS)

    async with planner_session() as ctx:
        task = await ctx.data_service.get_task(task_id, ctx.use_remote)
        changes.update(await _resolve_refs(ctx, class_ref, type_ref))
        edited = task.model_copy(update=changes)
        if edited.is_duration:
            _check_span(
                parse_date(edited.start_date, "--start"), parse_date(edited.end_date, "--end")
            )
        elif not edited.due_date:
            raise AppError("Deadline tasks need --due", exit_codes.ERROR_INVALID_ARGS)
        updated = await ctx.data_service.update_task(task_id, edited, ctx.use_remote)
    if updated is None:
        raise AppError(f"Failed to update task '{task_id}'")
    format_success(f"Task updated: {task_id}")


@app.command("delete")
@command_wrapper
async def delete_task(
    task_id: str = typer.Argument(..., help="Task id"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete a task."""
    async with planner_session() as ctx:
        task = await ctx.data_service.get_task(task_id, ctx.use_remote)
        if not yes and not typer.confirm(f"Delete task '{task.title}'?"):
            format_error("Cancelled")
            raise typer.Exit(0)
        await ctx.data_service.delete_task(task_id, ctx.use_remote)
    format_success(f"Task deleted: {task_id}")
