"""Config command for viewing and managing driftbench configuration."""

import typer

from ..app import app, console
from ...config import (
    CONFIG_FILE,
    get_api_key_for_provider,
    get_config,
    parse_model_string,
    reset_config,
)
from ...core.models import AtypicalityLevel


VALID_KEYS = {
    "models.fast",
    "models.strong",
    "experiment.iterations",
    "experiment.runs",
    "experiment.atypicality",
    "experiment.temperature",
    "experiment.template_path",
    "experiment.requests_path",
    "experiment.runs_dir",
    "defaults.log_requests",
    "defaults.logs_dir",
}

INT_FIELDS = {"iterations", "runs"}
FLOAT_FIELDS = {"temperature"}
BOOL_FIELDS = {"log_requests"}


@app.command("config")
def config_command(
    action: str = typer.Argument(
        ...,
        help="Action: show, set, reset",
    ),
    key: str | None = typer.Argument(
        None,
        help="Config key (e.g. models.fast, experiment.iterations)",
    ),
    value: str | None = typer.Argument(
        None,
        help="Value to set",
    ),
):
    """View or modify driftbench configuration.

    Examples:
        driftbench config show
        driftbench config set models.fast openai/gpt-4o-mini
        driftbench config set models.strong anthropic/claude-sonnet-4.5
        driftbench config set experiment.iterations 10
        driftbench config reset
    """
    if action == "show":
        _show_config()
    elif action == "set":
        if not key or value is None:
            console.print("[red]Usage:[/red] driftbench config set <key> <value>")
            console.print()
            console.print("Available keys:")
            for k in sorted(VALID_KEYS):
                console.print(f"  {k}")
            raise typer.Exit(1)
        _set_config(key, value)
    elif action == "reset":
        _reset_config()
    else:
        console.print(f"[red]Unknown action:[/red] {action}")
        console.print("Valid actions: show, set, reset")
        raise typer.Exit(1)


def _show_config():
    """Display current resolved configuration."""
    config = get_config()

    console.print()
    console.print("[bold]Driftbench Configuration[/bold]")
    console.print("─" * 40)

    console.print()
    console.print("[bold cyan]Models[/bold cyan]")
    console.print(f"  fast   = {config.models.fast}")
    console.print(f"  strong = {config.models.strong}  [dim](reconciliation)[/dim]")

    exp = config.experiment
    console.print()
    console.print("[bold cyan]Experiment[/bold cyan]")
    console.print(f"  iterations    = {exp.iterations}")
    console.print(f"  runs          = {exp.runs}")
    console.print(f"  atypicality   = {exp.atypicality}")
    console.print(f"  temperature   = {exp.temperature}")
    console.print(f"  template_path = {exp.template_path}")
    console.print(f"  requests_path = {exp.requests_path}")
    console.print(f"  runs_dir      = {exp.runs_dir}")

    console.print()
    console.print("[bold cyan]Defaults[/bold cyan]")
    console.print(f"  log_requests = {config.defaults.log_requests}")
    console.print(f"  logs_dir     = {config.defaults.logs_dir}")

    console.print()
    console.print("[bold cyan]API Keys[/bold cyan] (from env vars)")
    for provider in ("openai", "anthropic", "openrouter", "deepseek"):
        _show_key_status(provider, f"{provider.upper()}_API_KEY")

    console.print()
    if CONFIG_FILE.exists():
        console.print(f"Config file: {CONFIG_FILE}")
    else:
        console.print(f"Config file: [dim]not created yet[/dim] ({CONFIG_FILE})")
    console.print()


def _show_key_status(provider: str, env_var_label: str):
    """Show whether an API key is configured."""
    key = get_api_key_for_provider(provider)
    if key:
        masked = key[:8] + "..." + key[-4:] if len(key) > 16 else "***"
        console.print(f"  {env_var_label}: [green]{masked}[/green]")
    else:
        console.print(f"  {env_var_label}: [dim]not set[/dim]")


def _set_config(key: str, value: str):
    """Set a config value and save."""
    if key not in VALID_KEYS:
        console.print(f"[red]Unknown key:[/red] {key}")
        console.print()
        console.print("Available keys:")
        for k in sorted(VALID_KEYS):
            console.print(f"  {k}")
        raise typer.Exit(1)

    config = get_config()
    zone, field_name = key.split(".", 1)
    target = getattr(config, zone)

    try:
        if field_name in INT_FIELDS:
            coerced = int(value)
        elif field_name in FLOAT_FIELDS:
            coerced = float(value)
        elif field_name in BOOL_FIELDS:
            coerced = value.lower() in ("1", "true", "yes", "on")
        elif zone == "models":
            parse_model_string(value)
            coerced = value
        elif field_name == "atypicality":
            coerced = AtypicalityLevel.parse(value).value
        else:
            coerced = value
    except ValueError as e:
        kind = "integer" if field_name in INT_FIELDS else "number" if field_name in FLOAT_FIELDS else "value"
        console.print(f"[red]Invalid {kind}:[/red] {value}")
        if kind == "value":
            console.print(f"  {e}")
        raise typer.Exit(1)

    setattr(target, field_name, coerced)
    config.save()
    reset_config()  # Clear cached singleton so next get_config() reloads

    console.print(f"[green]✓[/green] Set {key} = {coerced}")
    console.print(f"  Saved to {CONFIG_FILE}")


def _reset_config():
    """Reset config to defaults."""
    if CONFIG_FILE.exists():
        CONFIG_FILE.unlink()
        reset_config()
        console.print("[green]✓[/green] Config reset to defaults")
        console.print(f"  Removed {CONFIG_FILE}")
    else:
        console.print("Config already at defaults (no config file exists)")
