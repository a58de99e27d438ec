"""Slow probe: battery health and charger identity from system_profiler."""

from __future__ import annotations

import json
import logging
import math
from collections.abc import Mapping, Sequence
from typing import Any, Final

from batmon.errors import ParseError
from batmon.models import NOT_AVAILABLE, HealthReading
from batmon.parsing import dig
from batmon.system.executor import CommandExecutor

logger: Final = logging.getLogger(__name__)

DEFAULT_SLOW_COMMAND: Final = ("system_profiler", "SPPowerDataType", "-json")

DATA_TYPE_KEY: Final = "SPPowerDataType"

# Some macOS releases wrap the battery and charger blocks in an extra object
BATTERY_WRAPPER: Final = "spbattery_information"
CHARGER_WRAPPER: Final = "sppower_ac_charger_information"

# Snapshot field -> path below the battery or charger block
HEALTH_PATHS: Final = {
    "condition": ("sppower_battery_health_info", "sppower_battery_health"),
    "max_capacity_rating": (
        "sppower_battery_health_info",
        "sppower_battery_health_maximum_capacity",
    ),
    "cycle_count": ("sppower_battery_health_info", "sppower_battery_cycle_count"),
    "serial": ("sppower_battery_model_info", "sppower_battery_serial_number"),
}
CHARGER_PATHS: Final = {
    "charger_wattage": ("sppower_ac_charger_watts",),
    "charger_name": ("sppower_ac_charger_name",),
}


def _to_count(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def _to_text(value: Any) -> str | None:
    if value is None or isinstance(value, (dict, list)):
        return None
    return str(value)


class SlowProbe:
    """Reads condition, capacity rating, cycle count and charger details.

    Issues one call to the slow source per read. Malformed JSON raises a
    ParseError; any key missing from an otherwise valid document resolves
    to its default and is recorded in the reading's ``missing`` set.
    """

    def __init__(
        self,
        executor: CommandExecutor,
        command: Sequence[str] = DEFAULT_SLOW_COMMAND,
    ) -> None:
        """Initialize the slow probe.

        Args:
            executor: Command executor used to run the source command
            command: Program and arguments producing the JSON document
        """
        self.executor = executor
        self.command = tuple(command)

    @property
    def source(self) -> str:
        return self.command[0]

    def read(self) -> HealthReading:
        """Run the source command and parse its JSON output.

        Returns:
            Parsed HealthReading

        Raises:
            ExecutionError: If the command cannot be run
            ParseError: If the output is not a JSON object
        """
        name, *args = self.command
        output = self.executor.execute(name, args)
        return self.parse(output)

    def parse(self, output: str) -> HealthReading:
        """Parse a system_profiler JSON document into a HealthReading."""
        try:
            document = json.loads(output)
        except json.JSONDecodeError as exc:
            raise ParseError(self.source, f"invalid JSON: {exc}", exc) from exc

        if not isinstance(document, Mapping):
            raise ParseError(self.source, "expected a JSON object at the top level")

        entries = document.get(DATA_TYPE_KEY)
        if not isinstance(entries, list):
            entries = []

        found: dict[str, Any] = {}
        for entry in entries:
            if not isinstance(entry, Mapping):
                continue
            self._collect(found, dig(entry, BATTERY_WRAPPER, default=entry), HEALTH_PATHS)
            self._collect(found, dig(entry, CHARGER_WRAPPER, default=entry), CHARGER_PATHS)

        cycle_count = _to_count(found.get("cycle_count"))
        values = {
            "condition": _to_text(found.get("condition")),
            "max_capacity_rating": _to_text(found.get("max_capacity_rating")),
            "charger_name": _to_text(found.get("charger_name")),
            "charger_wattage": _to_text(found.get("charger_wattage")),
        }
        missing = {key for key, value in values.items() if not value}
        if cycle_count is None:
            missing.add("cycle_count")
        if missing:
            logger.debug("Slow source missing fields: %s", ", ".join(sorted(missing)))

        return HealthReading(
            condition=values["condition"] or NOT_AVAILABLE,
            max_capacity_rating=values["max_capacity_rating"] or NOT_AVAILABLE,
            cycle_count=cycle_count or 0,
            charger_name=values["charger_name"] or NOT_AVAILABLE,
            charger_wattage=values["charger_wattage"] or NOT_AVAILABLE,
            serial=_to_text(found.get("serial")),
            missing=frozenset(missing),
        )

    @staticmethod
    def _collect(
        found: dict[str, Any], block: Any, paths: Mapping[str, tuple[str, ...]]
    ) -> None:
        """Record the first value seen for each field across all entries."""
        for name, path in paths.items():
            if name in found:
                continue
            value = dig(block, *path)
            if value is not None:
                found[name] = value
