"""User-configurable settings loaded from config.yaml."""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import ClassVar, Final

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from batmon.probes.fast import DEFAULT_FAST_COMMAND
from batmon.probes.slow import DEFAULT_SLOW_COMMAND

# Load environment variables from .env file(s)
load_dotenv()

logger: Final = logging.getLogger(__name__)


def _interpolate_env(content: str) -> str:
    return re.sub(r"\$\{(\w+)\}", lambda m: os.getenv(m.group(1), ""), content)


class UserSettings(BaseModel):
    """User settings for polling cadence and the source commands.

    Every field has a default, so the monitor runs without any config
    file. Values can be overridden in config.yaml.
    """

    # Default search paths for configuration
    DEFAULT_CONFIG_PATHS: ClassVar[list[Path]] = [
        Path("batmon.yaml"),
        Path("~/.config/batmon/config.yaml").expanduser(),
        Path("/etc/batmon/config.yaml"),
    ]

    # Polling cadence
    fast_interval_seconds: float = Field(
        2.0, gt=0, description="Seconds between fast-source (ioreg) polls"
    )
    slow_interval_seconds: float = Field(
        60.0, gt=0, description="Seconds between slow-source (system_profiler) polls"
    )
    command_timeout_seconds: float = Field(
        10.0, gt=0, description="Seconds before a source command is killed"
    )

    # Display
    low_battery_percent: int = Field(
        20, ge=0, le=100, description="Charge % below which the display turns red"
    )

    # Source commands
    fast_command: list[str] = Field(
        default_factory=lambda: list(DEFAULT_FAST_COMMAND),
        description="Program and arguments printing battery key/value pairs",
    )
    slow_command: list[str] = Field(
        default_factory=lambda: list(DEFAULT_SLOW_COMMAND),
        description="Program and arguments printing the SPPowerDataType JSON",
    )

    # ---- validators ----
    @field_validator("fast_command", "slow_command")
    @classmethod
    def validate_command(cls, v: list[str]) -> list[str]:
        if not v or not v[0]:
            raise ValueError("command must name a program")
        return v

    @model_validator(mode="after")
    def check_cadence_order(self) -> UserSettings:
        if self.slow_interval_seconds < self.fast_interval_seconds:
            raise ValueError("slow_interval_seconds cannot be shorter than fast_interval_seconds")
        return self

    # ---- convenience methods ----
    def is_low_battery(self, percent: int) -> bool:
        """Check if a charge percentage is below the warning threshold.

        Args:
            percent: Battery charge percentage

        Returns:
            True if the charge is below ``low_battery_percent``
        """
        return percent < self.low_battery_percent

    @classmethod
    def load(cls, path: Path | None = None) -> UserSettings:
        """Load configuration from a YAML file.

        Args:
            path: Path to config file (optional, searches default locations if None)

        Returns:
            Validated UserSettings object; defaults when no file is found

        Raises:
            FileNotFoundError: If an explicitly requested file does not exist
            RuntimeError: If the config file cannot be parsed or is invalid
        """
        # Try to find config file
        if path is None:
            # Check environment variable first
            env_path = os.environ.get("BATMON_CONFIG")
            if env_path:
                path = Path(env_path)
                if not path.exists():
                    raise FileNotFoundError(f"Config file from BATMON_CONFIG not found: {path}")
            else:
                # Try default paths
                for default_path in cls.DEFAULT_CONFIG_PATHS:
                    if default_path.exists():
                        path = default_path
                        break
                else:
                    logger.debug("No config file found, using defaults")
                    return cls()
        elif not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        # Load and parse config
        import yaml  # local import to avoid hard dep for callers

        try:
            raw = _interpolate_env(path.read_text())
            data = yaml.safe_load(raw)
        except Exception as exc:
            raise RuntimeError(f"Unable to read config YAML: {exc}") from exc

        try:
            return cls.model_validate(data or {})
        except ValidationError as err:
            raise RuntimeError(f"Invalid configuration:\n{err}") from err
