"""Internal application settings derived from user settings."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path

from batmon.scheduling.models import RefreshSettings
from batmon.settings.user import UserSettings


@dataclass
class AppPaths:
    """Application file and directory paths."""

    templates_dir: Path
    status_template: str = "status.txt.j2"

    @classmethod
    def from_package_dir(cls, package_dir: Path) -> AppPaths:
        """Create paths relative to the installed package."""
        return cls(templates_dir=package_dir / "display" / "templates")


class ApplicationSettings:
    """Application settings container.

    Combines user-provided configuration with application defaults:

    - Path configuration (display templates)
    - Refresh cadence as timedeltas for the scheduler
    - Command timeout for the executor

    Examples:
        user_settings = UserSettings.load()
        app_settings = ApplicationSettings(user_settings)
        app_settings.refresh.fast_interval
    """

    def __init__(
        self,
        user_settings: UserSettings,
        paths: AppPaths | None = None,
        refresh: RefreshSettings | None = None,
    ):
        """Initialize application settings with configuration sources."""
        self.user = user_settings
        self.paths = paths or AppPaths.from_package_dir(Path(__file__).parents[1])
        self.refresh = refresh or RefreshSettings(
            fast_interval=timedelta(seconds=user_settings.fast_interval_seconds),
            slow_interval=timedelta(seconds=user_settings.slow_interval_seconds),
        )

    @property
    def command_timeout(self) -> float:
        """Seconds before a source command is killed."""
        return self.user.command_timeout_seconds
