"""Battery monitor CLI application.

This module provides the command-line interface for the battery monitor:
the live polling display, one-shot snapshots and configuration helpers.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any, Final

import typer
import yaml
from pydantic import ValidationError

from batmon.controller import BatteryMonitor
from batmon.display.console import ConsoleDisplay
from batmon.errors import ProbeError
from batmon.settings.user import UserSettings

# ── CLI setup ────────────────────────────────────────────────────────────────
app = typer.Typer(help="Battery monitor CLI", add_completion=False)
config_app = typer.Typer(help="Config helpers")
app.add_typer(config_app, name="config")

logger: Final = logging.getLogger(__name__)  # Will be "batmon.cli"

# Options for the main commands
CONFIG_OPTION = typer.Option(None, "--config", "-c", exists=True, dir_okay=False)
DEBUG_OPTION = typer.Option(False, "--debug", help="Enable debug logging")
ONCE_OPTION = typer.Option(False, "--once", "-1", help="Poll once then exit")
JSON_OPTION = typer.Option(False, "--json", help="Print the snapshot as JSON")
DST_ARGUMENT = typer.Argument(..., help="Output config.yaml")


def create_monitor(config: Path | None, debug: bool) -> BatteryMonitor:
    """Build the controller used by the commands."""
    return BatteryMonitor(config, debug=debug)


@app.command()
def run(
    config: Path | None = CONFIG_OPTION,
    once: bool = ONCE_OPTION,
    debug: bool = DEBUG_OPTION,
) -> None:
    """Run the live battery monitor until interrupted."""
    monitor = create_monitor(config, debug)
    scheduler = monitor.create_scheduler()
    try:
        scheduler.run(once=once)
    except KeyboardInterrupt:
        scheduler.stop()


@app.command()
def snapshot(
    config: Path | None = CONFIG_OPTION,
    as_json: bool = JSON_OPTION,
    debug: bool = DEBUG_OPTION,
) -> None:
    """Poll both sources once and print the merged snapshot."""
    monitor = create_monitor(config, debug)
    try:
        snap = monitor.poll()
    except ProbeError as exc:
        typer.secho(f"Error: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc

    if as_json:
        typer.echo(snap.model_dump_json(indent=2))
        return

    display = ConsoleDisplay(monitor.settings, clear_screen=False)
    typer.echo(display.render(snap), nl=False)


# ───────────────────────── config sub-commands ───────────────────────────────
@config_app.command("validate")
def validate_config(file: Path):
    """Validate a YAML config file against the schema."""
    try:
        UserSettings.load(file)
        typer.echo("✅ Config valid")
    except (RuntimeError, FileNotFoundError) as exc:
        typer.secho(str(exc), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc


@config_app.command("wizard")
def wizard(dst: Path = DST_ARGUMENT):
    """Interactive prompt to create a config file."""
    typer.echo("Interactive config builder - press Enter for defaults.")
    defaults = UserSettings()

    while True:
        data: dict[str, Any] = {
            "fast_interval_seconds": float(
                typer.prompt("Fast poll interval (s)", default=defaults.fast_interval_seconds)
            ),
            "slow_interval_seconds": float(
                typer.prompt("Slow poll interval (s)", default=defaults.slow_interval_seconds)
            ),
            "command_timeout_seconds": float(
                typer.prompt("Command timeout (s)", default=defaults.command_timeout_seconds)
            ),
            "low_battery_percent": int(
                typer.prompt("Low battery warning (%)", default=defaults.low_battery_percent)
            ),
        }
        try:
            cfg = UserSettings(**data)
            break  # valid → exit loop
        except ValidationError as err:
            typer.secho("\nConfig error(s):", fg=typer.colors.RED, err=True)
            for e in err.errors():
                field = e["loc"][0] if e["loc"] else "config"
                typer.secho(f"  • {field} - {e['msg']}", fg=typer.colors.RED, err=True)
            typer.echo("Please re-enter the values.\n")

    dst.write_text(yaml.safe_dump(cfg.model_dump(), sort_keys=False), encoding="utf-8")
    typer.secho(f"Config written to {dst}", fg=typer.colors.GREEN)


# ───────────────────────── module entrypoint ────────────────────────────────
if __name__ == "__main__":
    try:
        app()
    except KeyboardInterrupt:
        sys.exit(0)
