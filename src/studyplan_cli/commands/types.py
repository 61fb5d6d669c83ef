"""Task type management commands."""

import typer

from studyplan_cli.models import TaskType, generate_entity_id
from studyplan_cli.utils import exit_codes
from studyplan_cli.utils.typer_helpers import SuggestingGroup
from studyplan_cli.utils.ui.formatters import format_error, format_output, format_success

from .decorators import AppError, command_wrapper
from .utils import find_by_ref, planner_session

app = typer.Typer(cls=SuggestingGroup, help="Task type management commands")


@app.command("list")
@command_wrapper
async def list_types(
    output: str = typer.Option("pretty", "--output", "-o", help="Output format"),
) -> None:
    """List all task types."""
    async with planner_session() as ctx:
        task_types = await ctx.data_service.get_task_types(ctx.use_remote)
    format_output([{"id": t.id, "name": t.name} for t in task_types], output)


@app.command("add")
@command_wrapper
async def add_type(
    name: str = typer.Argument(..., help="Type name (e.g. 'Homework')"),
) -> None:
    """Create a new task type."""
    name = name.strip()
    if not name:
        raise AppError("Type name cannot be empty", exit_codes.ERROR_INVALID_ARGS)

    task_type = TaskType(id=generate_entity_id(name, "type"), name=name)
    async with planner_session() as ctx:
        added = await ctx.data_service.add_task_type(task_type, ctx.use_remote)
    if added is None:
        raise AppError(f"Failed to add task type '{name}'")
    format_success(f"Task type created: {added.id}")


@app.command("rename")
@command_wrapper
async def rename_type(
    ref: str = typer.Argument(..., help="Type id or name"),
    name: str = typer.Argument(..., help="New name"),
) -> None:
    """Rename a task type."""
    async with planner_session() as ctx:
        task_types = await ctx.data_service.get_task_types(ctx.use_remote)
        task_type = find_by_ref(task_types, ref, "task type")
        updated = await ctx.data_service.update_task_type(
            task_type.id,
            task_type.model_copy(update={"name": name.strip()}),
            ctx.use_remote,
        )
    if updated is None:
        raise AppError(f"Failed to rename task type '{ref}'")
    format_success(f"Task type renamed: {task_type.id}")


@app.command("delete")
@command_wrapper
async def delete_type(
    ref: str = typer.Argument(..., help="Type id or name"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete a task type."""
    async with planner_session() as ctx:
        task_types = await ctx.data_service.get_task_types(ctx.use_remote)
        task_type = find_by_ref(task_types, ref, "task type")
        if not yes and not typer.confirm(f"Delete task type '{task_type.name}'?"):
            format_error("Cancelled")
            raise typer.Exit(0)
        await ctx.data_service.delete_task_type(task_type.id, ctx.use_remote)
    format_success(f"Task type deleted: {task_type.id}")
