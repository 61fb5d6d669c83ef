"""Class management commands."""

from pathlib import Path

import typer

from studyplan_cli.models import SchoolClass, generate_entity_id
from studyplan_cli.utils import exit_codes
from studyplan_cli.utils.typer_helpers import SuggestingGroup
from studyplan_cli.utils.ui.formatters import format_error, format_output, format_success

from .decorators import AppError, command_wrapper
from .utils import find_by_ref, planner_session

app = typer.Typer(cls=SuggestingGroup, help="Class management commands")


def _class_row(school_class: SchoolClass) -> dict:
    syllabus = school_class.syllabus
    return {
        "id": school_class.id,
        "name": school_class.name,
        "syllabus": f"{syllabus.filename} ({syllabus.size_kb} KB)" if syllabus else None,
    }


@app.command("list")
@command_wrapper
async def list_classes(
    output: str = typer.Option("pretty", "--output", "-o", help="Output format"),
) -> None:
    """List all classes."""
    async with planner_session() as ctx:
        classes = await ctx.data_service.get_classes(ctx.use_remote)
    format_output([_class_row(c) for c in classes], output)


@app.command("show")
@command_wrapper
async def show_class(
    ref: str = typer.Argument(..., help="Class id or name"),
    output: str = typer.Option("table", "--output", "-o", help="Output format"),
) -> None:
    """Show class details."""
    async with planner_session() as ctx:
        classes = await ctx.data_service.get_classes(ctx.use_remote)
    format_output(_class_row(find_by_ref(classes, ref, "class")), output)


@app.command("add")
@command_wrapper
async def add_class(
    name: str = typer.Argument(..., help="Class name (e.g. 'CS 175')"),
    syllabus: Path | None = typer.Option(
        None, "--syllabus", help="Syllabus file (.pdf, .doc, .docx)"
    ),
) -> None:
    """Create a new class."""
    name = name.strip()
    if not name:
        raise AppError("Class name cannot be empty", exit_codes.ERROR_INVALID_ARGS)

    school_class = SchoolClass(id=generate_entity_id(name, "class"), name=name)
    async with planner_session() as ctx:
        added = await ctx.data_service.add_class(school_class, ctx.use_remote)
        if added is None:
            raise AppError(f"Failed to add class '{name}'")
        if syllabus is not None:
            await _attach(ctx, added.id, syllabus)
    format_success(f"Class created: {added.id}")


@app.command("rename")
@command_wrapper
async def rename_class(
    ref: str = typer.Argument(..., help="Class id or name"),
    name: str = typer.Argument(..., help="New name"),
) -> None:
    """Rename a class."""
    async with planner_session() as ctx:
        classes = await ctx.data_service.get_classes(ctx.use_remote)
        school_class = find_by_ref(classes, ref, "class")
        updated = await ctx.data_service.update_class(
            school_class.id,
            school_class.model_copy(update={"name": name.strip()}),
            ctx.use_remote,
        )
    if updated is None:
        raise AppError(f"Failed to rename class '{ref}'")
    format_success(f"Class renamed: {school_class.id}")


@app.command("delete")
@command_wrapper
async def delete_class(
    ref: str = typer.Argument(..., help="Class id or name"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete a class. Tasks referencing it are kept."""
    async with planner_session() as ctx:
        classes = await ctx.data_service.get_classes(ctx.use_remote)
        school_class = find_by_ref(classes, ref, "class")
        if not yes and not typer.confirm(f"Delete class '{school_class.name}'?"):
            format_error("Cancelled")
            raise typer.Exit(0)
        await ctx.data_service.delete_class(school_class.id, ctx.use_remote)
    format_success(f"Class deleted: {school_class.id}")


async def _attach(ctx, class_id: str, path: Path) -> None:
    if not path.is_file():
        raise AppError(f"File not found: {path}", exit_codes.ERROR_NOT_FOUND)
    try:
        updated = await ctx.data_service.attach_syllabus(class_id, path, ctx.use_remote)
    except ValueError as e:
        raise AppError(str(e), exit_codes.ERROR_INVALID_ARGS) from e
    if updated is None:
        raise AppError(f"Failed to attach syllabus to '{class_id}'")


@app.command("attach-syllabus")
@command_wrapper
async def attach_syllabus(
    ref: str = typer.Argument(..., help="Class id or name"),
    path: Path = typer.Argument(..., help="Syllabus file (.pdf, .doc, .docx)"),
) -> None:
    """Attach or replace the syllabus of a class."""
    async with planner_session() as ctx:
        classes = await ctx.data_service.get_classes(ctx.use_remote)
        school_class = find_by_ref(classes, ref, "class")
        await _attach(ctx, school_class.id, path)
    format_success(f"Syllabus attached to {school_class.name}: {path.name}")


@app.command("remove-syllabus")
@command_wrapper
async def remove_syllabus(
    ref: str = typer.Argument(..., help="Class id or name"),
) -> None:
    """Remove the syllabus of a class."""
    async with planner_session() as ctx:
        classes = await ctx.data_service.get_classes(ctx.use_remote)
        school_class = find_by_ref(classes, ref, "class")
        if school_class.syllabus is None:
            raise AppError(
                f"Class '{school_class.name}' has no syllabus", exit_codes.ERROR_NOT_FOUND
            )
        await ctx.data_service.remove_syllabus(school_class.id, ctx.use_remote)
    format_success(f"Syllabus removed from {school_class.name}")


@app.command("export-syllabus")
@command_wrapper
async def export_syllabus(
    ref: str = typer.Argument(..., help="Class id or name"),
    dest: Path | None = typer.Option(
        None, "--dest", "-d", help="Output file or directory (default: current directory)"
    ),
) -> None:
    """Write the syllabus of a class back to a file."""
    async with planner_session() as ctx:
        classes = await ctx.data_service.get_classes(ctx.use_remote)
    school_class = find_by_ref(classes, ref, "class")
    syllabus = school_class.syllabus
    if syllabus is None:
        raise AppError(
            f"Class '{school_class.name}' has no syllabus", exit_codes.ERROR_NOT_FOUND
        )

    target = dest or Path.cwd()
    if target.is_dir():
        target = target / syllabus.filename
    target.write_bytes(syllabus.decode())
    format_success(f"Syllabus written to {target}")
