"""Sync and session commands for StudyPlan CLI.

``login`` stores the session and immediately reconciles the local vault with
the remote store; ``sync`` repeats the reconciliation on demand.
"""

import typer

from studyplan_cli.services.auth_service import AuthService
from studyplan_cli.services.config_service import get_config_service
from studyplan_cli.services.context_manager import get_planner_context
from studyplan_cli.services.sync_service import SyncResult
from studyplan_cli.services.sync_state import SyncState
from studyplan_cli.utils import exit_codes
from studyplan_cli.utils.ui.console import get_console
from studyplan_cli.utils.ui.formatters import format_output, format_success, format_warning

from .decorators import AppError, command_wrapper
from .utils import planner_session

console = get_console()


def _display_sync_result(result: SyncResult) -> None:
    """Display sync result summary."""
    direction = {"push": "Uploaded", "pull": "Downloaded"}.get(result.direction or "", "")
    console.print()
    if direction:
        console.print(f"  [cyan]{direction}:[/cyan]")
        console.print(f"    Classes:    {result.classes}")
        console.print(f"    Task types: {result.task_types}")
        console.print(f"    Tasks:      {result.tasks}")

    if result.duplicates_dropped:
        console.print(
            f"\n  [yellow]⚠ {result.duplicates_dropped} duplicate rows skipped[/yellow]"
        )

    if result.success:
        console.print(f"\n[green]✓ Sync complete in {result.duration:.2f}s[/green]")
    else:
        console.print(f"\n[red]✗ Sync failed: {result.error}[/red]")


@command_wrapper
async def login_command(
    user_id: str = typer.Option(..., "--user-id", help="Id of the signed-in user"),
    token: str = typer.Option(..., "--token", help="Session access token"),
    email: str | None = typer.Option(None, "--email", help="Email address"),
    no_sync: bool = typer.Option(False, "--no-sync", help="Skip the initial sync"),
) -> None:
    """Store a session and sync the local planner with the remote store."""
    config_svc = get_config_service()
    if not config_svc.config.remote.is_configured:
        raise AppError(
            "Remote store URL is not configured. "
            "Run 'studyplan config set remote.url <url>' first.",
            exit_codes.ERROR_INVALID_ARGS,
        )

    config_svc.save_credentials(token, user_id, email)
    get_planner_context.cache_clear()
    format_success(f"Logged in as {email or user_id}")

    if no_sync or not config_svc.config.sync.on_login:
        return

    async with planner_session() as ctx:
        ok = await ctx.sync_service.synchronize(ctx.user_id)

    if ok:
        console.print("[green]✓ Planner synchronized[/green]")
    else:
        # Login stays valid; the planner keeps working on the last data read.
        format_warning("Initial sync failed. Run 'studyplan sync' to retry.")


@command_wrapper
def logout_command() -> None:
    """Forget the stored session. The planner goes back to the local vault."""
    get_config_service().clear_credentials()
    get_planner_context.cache_clear()
    format_success("Logged out")


@command_wrapper(auth_required=True)
async def sync_command(
    output: str = typer.Option("pretty", "--output", "-o", help="Output format"),
) -> None:
    """Reconcile the local vault with the remote store.

    The first sync of a user uploads the local planner; every later sync
    replaces the local planner with the remote one.
    """
    async with planner_session() as ctx:
        result = await ctx.sync_service.run(ctx.user_id)

    if output == "pretty":
        _display_sync_result(result)
    else:
        format_output(result.to_dict(), output)

    if not result.success:
        raise typer.Exit(exit_codes.ERROR_NETWORK)


@command_wrapper
def sync_status_command(
    output: str = typer.Option("pretty", "--output", "-o", help="Output format"),
) -> None:
    """Show the session and the last successful sync."""
    ctx = get_planner_context()
    last_sync = SyncState(ctx.store).get_last_sync()
    status = {
        "authenticated": AuthService.is_authenticated(),
        "user_id": ctx.user_id,
        "storage": "remote" if ctx.use_remote else "local",
        "last_sync": last_sync.isoformat() if last_sync else None,
    }
    format_output(status, output)
