"""Configuration management commands."""

import typer

from studyplan_cli.services.config_service import get_config_service
from studyplan_cli.services.context_manager import get_planner_context
from studyplan_cli.utils import exit_codes
from studyplan_cli.utils.typer_helpers import SuggestingGroup
from studyplan_cli.utils.ui.console import get_console
from studyplan_cli.utils.ui.formatters import format_error, format_output, format_success

from .decorators import AppError, command_wrapper

app = typer.Typer(cls=SuggestingGroup, help="Configuration management commands")
console = get_console()


def _redact(config: dict) -> dict:
    remote = config.get("remote", {})
    if remote.get("api_key"):
        remote["api_key"] = remote["api_key"][:6] + "…"
    return config


@app.command("view")
@command_wrapper
def view_config(
    output: str = typer.Option("table", "--output", "-o", help="Output format"),
) -> None:
    """View current configuration."""
    config_svc = get_config_service()
    config = _redact(config_svc.config.model_dump())
    config["config_file"] = str(config_svc.config_path)
    config["database"] = str(config_svc.db_path)
    format_output(config, output)


@app.command("get")
@command_wrapper
def get_config(
    key: str = typer.Argument(..., help="Configuration key (e.g., remote.url)"),
) -> None:
    """Get a configuration value."""
    try:
        value = get_config_service().get(key)
    except KeyError as e:
        raise AppError(
            f"Configuration key '{key}' not found", exit_codes.ERROR_INVALID_ARGS
        ) from e
    console.print(value)


@app.command("set")
@command_wrapper
def set_config(
    key: str = typer.Argument(..., help="Configuration key (e.g., remote.url)"),
    value: str = typer.Argument(..., help="Configuration value"),
) -> None:
    """Set a configuration value."""
    parsed_value: str | int | bool = value
    if value.lower() in ("true", "false"):
        parsed_value = value.lower() == "true"
    elif value.isdigit():
        parsed_value = int(value)

    try:
        get_config_service().set(key, parsed_value)
    except KeyError as e:
        raise AppError(
            f"Configuration key '{key}' not found", exit_codes.ERROR_INVALID_ARGS
        ) from e
    except ValueError as e:
        raise AppError(
            f"Invalid value for '{key}': {e}", exit_codes.ERROR_INVALID_ARGS
        ) from e

    get_planner_context.cache_clear()
    format_success(f"Configuration '{key}' set to '{parsed_value}'")


@app.command("reset")
@command_wrapper
def reset_config(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Reset configuration to defaults."""
    if not yes and not typer.confirm("Reset all configuration to defaults?"):
        format_error("Cancelled")
        raise typer.Exit(0)
    get_config_service().reset()
    get_planner_context.cache_clear()
    format_success("Configuration reset to defaults")
