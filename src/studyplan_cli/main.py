"""Main entry point for StudyPlan CLI."""

import typer

from studyplan_cli import __version__
from studyplan_cli.commands import calendar_command, classes, config, sync, tasks, types
from studyplan_cli.services.config_service import get_config_service
from studyplan_cli.utils.typer_helpers import SuggestingGroup
from studyplan_cli.utils.ui.console import get_console

# Create main app with custom group class
app = typer.Typer(
    name="studyplan",
    cls=SuggestingGroup,
    help="A command-line academic planner: classes, tasks and a calendar",
    no_args_is_help=True,
)

console = get_console()


@app.callback()
def main_callback() -> None:
    """A command-line academic planner: classes, tasks and a calendar."""
    if not get_config_service().config.output.color:
        console.no_color = True


# Add subcommands
app.add_typer(classes.app, name="classes", help="Class management commands")
app.add_typer(types.app, name="types", help="Task type management commands")
app.add_typer(tasks.app, name="tasks", help="Task management commands")
app.add_typer(config.app, name="config", help="Configuration management")


# Add top-level commands
@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"[bold]StudyPlan CLI[/bold] version [cyan]{__version__}[/cyan]")


@app.command()
def login(
    user_id: str = typer.Option(..., "--user-id", help="Id of the signed-in user"),
    token: str = typer.Option(..., "--token", help="Session access token"),
    email: str | None = typer.Option(None, "--email", help="Email address"),
    no_sync: bool = typer.Option(False, "--no-sync", help="Skip the initial sync"),
) -> None:
    """Sign in and sync the planner with the remote store."""
    sync.login_command(user_id=user_id, token=token, email=email, no_sync=no_sync)


@app.command()
def logout() -> None:
    """Sign out. The planner goes back to the local vault."""
    sync.logout_command()


@app.command("sync")
def sync_planner(
    output: str = typer.Option("pretty", "--output", "-o", help="Output format"),
) -> None:
    """Reconcile the local vault with the remote store."""
    sync.sync_command(output=output)


@app.command("sync-status")
def sync_status(
    output: str = typer.Option("pretty", "--output", "-o", help="Output format"),
) -> None:
    """Show the session and the last successful sync."""
    sync.sync_status_command(output=output)


@app.command()
def calendar(
    view: str = typer.Option("month", "--view", "-v", help="month, week or day"),
    on: str | None = typer.Option(None, "--date", "-d", help="Anchor date (YYYY-MM-DD)"),
    offset: int = typer.Option(
        0, "--offset", "-n", help="Periods to move from the anchor (e.g. -1 for previous)"
    ),
    output: str = typer.Option("pretty", "--output", "-o", help="Output format"),
) -> None:
    """Show the calendar (month view by default)."""
    calendar_command.show_calendar(view=view, on=on, offset=offset, output=output)


@app.command()
def day(
    on: str | None = typer.Argument(None, help="Day to show (YYYY-MM-DD, default today)"),
    output: str = typer.Option("pretty", "--output", "-o", help="Output format"),
) -> None:
    """Show the tasks of a single day."""
    calendar_command.show_calendar(view="day", on=on, offset=0, output=output)


@app.command()
def title(
    new_title: str | None = typer.Argument(None, help="New planner title"),
) -> None:
    """Show or change the planner title."""
    calendar_command.set_title(new_title)


# Main entry point
def main():
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
