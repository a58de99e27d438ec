"""Terminal rendering of power snapshots."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Final, cast

import typer
from jinja2 import Environment, FileSystemLoader, Template

from batmon.errors import ProbeError
from batmon.models import PowerSnapshot
from batmon.settings import ApplicationSettings, UserSettings
from batmon.utils.formatting import format_temperature, format_watts
from batmon.utils.time import TimeUtils

logger: Final = logging.getLogger(__name__)

TITLE: Final = "Battery Monitor"


class TemplateRenderer:
    """Handles the Jinja2 environment for the status screen.

    Registers the formatting filters the template relies on and renders
    a snapshot plus an optional error line to plain text.
    """

    status_template: Template

    def __init__(self, templates_dir: Path, template_name: str = "status.txt.j2") -> None:
        """Initialize the template renderer.

        Args:
            templates_dir: Directory containing templates
            template_name: File name of the status template
        """
        self.env = Environment(
            loader=FileSystemLoader(templates_dir),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )
        self.env.filters.update(
            {
                "temperature": format_temperature,
                "watts": format_watts,
                "strftime": TimeUtils.format_datetime,
            }
        )
        self.status_template = self.env.get_template(template_name)

    def render_status(self, **context: Any) -> str:
        """Render the status template with the provided context."""
        return cast(str, self.status_template.render(**context))


class ConsoleDisplay:
    """DisplayBridge that prints the status screen to the terminal.

    Keeps the last snapshot so an error can be shown underneath it
    instead of replacing it. The charge percentage turns red below the
    configured low-battery threshold.
    """

    def __init__(
        self,
        settings: ApplicationSettings | None = None,
        renderer: TemplateRenderer | None = None,
        clear_screen: bool = True,
    ) -> None:
        """Initialize the console display.

        Args:
            settings: Application settings (default: built-in defaults)
            renderer: Optional custom template renderer
            clear_screen: Clear the terminal before each redraw
        """
        self.settings = settings or ApplicationSettings(UserSettings())
        self.renderer = renderer or TemplateRenderer(
            self.settings.paths.templates_dir, self.settings.paths.status_template
        )
        self.clear_screen = clear_screen
        self.last_snapshot: PowerSnapshot | None = None

    def show_snapshot(self, snapshot: PowerSnapshot) -> None:
        """Remember and draw a new snapshot."""
        self.last_snapshot = snapshot
        self._draw(snapshot, error=None)

    def show_error(self, error: ProbeError) -> None:
        """Draw the error below the last snapshot, or alone if there is none."""
        message = f"Error: {error}"
        if self.last_snapshot is None:
            self._clear()
            typer.secho(message, fg=typer.colors.RED, err=True)
            return
        self._draw(self.last_snapshot, error=message)

    def render(self, snapshot: PowerSnapshot, error: str | None = None) -> str:
        """Render the status screen to text without printing it."""
        return self.renderer.render_status(**self.build_context(snapshot, error))

    def build_context(self, snapshot: PowerSnapshot, error: str | None = None) -> dict[str, Any]:
        """Build the template context for a snapshot."""
        low = self.settings.user.is_low_battery(snapshot.percent_charge)
        percent = typer.style(
            snapshot.formatted_percent,
            fg=typer.colors.RED if low else typer.colors.GREEN,
            bold=True,
        )
        if error:
            error = typer.style(error, fg=typer.colors.RED)
        return {
            "title": TITLE,
            "snapshot": snapshot,
            "percent": percent,
            "low_battery": low,
            "error": error,
        }

    def _draw(self, snapshot: PowerSnapshot, error: str | None) -> None:
        self._clear()
        typer.echo(self.render(snapshot, error), nl=False)

    def _clear(self) -> None:
        if self.clear_screen:
            typer.clear()
