# filepath: src/batmon/controller.py
"""Core controller for the battery monitor."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Final

from batmon.aggregator import merge
from batmon.cache import HealthCache
from batmon.display.console import ConsoleDisplay
from batmon.display.protocols import DisplayBridge, MockDisplay
from batmon.models import HealthReading, PowerSnapshot
from batmon.probes.fast import FastProbe
from batmon.probes.slow import SlowProbe
from batmon.scheduling import Scheduler
from batmon.settings.application import ApplicationSettings
from batmon.settings.user import UserSettings
from batmon.system.executor import CommandExecutor, FakeExecutor, SubprocessExecutor

logger: Final = logging.getLogger(__name__)


class BatteryMonitor:
    """Main controller class for the battery monitor.

    This class wires the monitoring pipeline together:
    - Loading configuration
    - Creating the command executor and both probes
    - Owning the health cache shared by the aggregator and scheduler
    - Producing merged snapshots on demand

    All application dependencies are created here and passed explicitly;
    nothing is held in module-level state.
    """

    def __init__(
        self,
        config_path: Path | None = None,
        executor: CommandExecutor | None = None,
        display: DisplayBridge | None = None,
        settings: UserSettings | None = None,
        debug: bool = False,
    ):
        """Initialize the battery monitor controller.

        Args:
            config_path: Path to config.yaml (default: search, then built-ins)
            executor: Optional custom command executor
            display: Optional custom display bridge
            settings: Pre-built user settings, bypassing config loading
            debug: Enable debug logging
        """
        # Configure logging
        logging.basicConfig(
            level=logging.DEBUG if debug else logging.INFO,
            format="%(asctime)s [%(levelname)s] %(message)s",
        )

        # Load configuration and derive application settings
        self.config: UserSettings = settings or UserSettings.load(config_path)
        self.settings = ApplicationSettings(self.config)

        # Allow dependency injection or create defaults
        self.executor = executor or SubprocessExecutor(self.settings.command_timeout)
        self.fast_probe = FastProbe(self.executor, self.config.fast_command)
        self.slow_probe = SlowProbe(self.executor, self.config.slow_command)
        self.health_cache = HealthCache(self.slow_probe)
        self.display = display or ConsoleDisplay(self.settings)

    def poll(self) -> PowerSnapshot:
        """Read the fast source and merge it with the cached health reading.

        The fast probe runs first, so a failing fast source never touches
        the health cache.

        Raises:
            ExecutionError: If the fast source command cannot be run
        """
        fast = self.fast_probe.read()
        return merge(fast, self.health_cache.read())

    def refresh_health(self) -> HealthReading:
        """Re-read the slow source into the health cache.

        Raises:
            ProbeError: If the refresh fails; the cached reading is kept
        """
        reading = self.health_cache.refresh()
        logger.info(
            "Health refreshed: %s, %d cycles, max capacity %s",
            reading.condition,
            reading.cycle_count,
            reading.max_capacity_rating,
        )
        return reading

    def create_scheduler(self) -> Scheduler:
        """Create a scheduler driving this monitor and its display."""
        return Scheduler(self, self.display, self.settings.refresh)

    @classmethod
    def create_for_testing(
        cls,
        fast_output: str | None = None,
        slow_output: str | None = None,
        display: DisplayBridge | None = None,
        settings: UserSettings | None = None,
    ) -> BatteryMonitor:
        """Create a BatteryMonitor fed from canned command output.

        Args:
            fast_output: Text the fast source command returns (None: command missing)
            slow_output: JSON the slow source command returns (None: command missing)
            display: Display bridge (default: MockDisplay)
            settings: User settings (default: built-in defaults)

        Returns:
            BatteryMonitor backed by a FakeExecutor
        """
        config = settings or UserSettings()
        outputs: dict[str, str] = {}
        if fast_output is not None:
            outputs[config.fast_command[0]] = fast_output
        if slow_output is not None:
            outputs[config.slow_command[0]] = slow_output

        return cls(
            executor=FakeExecutor(outputs),
            display=display or MockDisplay(),
            settings=config,
            debug=True,
        )
