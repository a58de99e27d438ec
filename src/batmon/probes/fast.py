"""Fast probe: volatile battery readings from the I/O Registry."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Final

from batmon.models import ChargingState, FastReading
from batmon.parsing import FieldKind, FieldSpec, KeyValueScanner, ScanResult
from batmon.system.executor import CommandExecutor
from batmon.utils.formatting import TIME_REMAINING_UNKNOWN, format_time_remaining

logger: Final = logging.getLogger(__name__)

DEFAULT_FAST_COMMAND: Final = ("ioreg", "-rn", "AppleSmartBattery")

# MaxCapacity is the basis for the percentage, not the health rating
FAST_FIELDS: Final = (
    FieldSpec("CurrentCapacity", FieldKind.INTEGER, 0),
    FieldSpec("MaxCapacity", FieldKind.INTEGER, 0),
    FieldSpec("IsCharging", FieldKind.FLAG, False),
    FieldSpec("FullyCharged", FieldKind.FLAG, False),
    FieldSpec("ExternalConnected", FieldKind.FLAG, None),
    FieldSpec("TimeRemaining", FieldKind.INTEGER, TIME_REMAINING_UNKNOWN),
    FieldSpec("Temperature", FieldKind.INTEGER, None),
    FieldSpec("Watts", FieldKind.INTEGER, None),
    FieldSpec("Serial", FieldKind.STRING, None),
)

# Source key -> snapshot field it feeds; FullyCharged is optional by contract
_FIELD_NAMES: Final = {
    "CurrentCapacity": "percent_charge",
    "MaxCapacity": "percent_charge",
    "IsCharging": "charging_state",
    "ExternalConnected": "power_source",
    "TimeRemaining": "time_remaining",
    "Temperature": "temperature_celsius",
    "Watts": "wattage",
    "Serial": "serial",
}


def percent_charge(current: int, reference: int) -> int:
    """Return floor(current * 100 / reference), or 0 without a reference.

    The result is deliberately not clamped to 100.
    """
    if reference <= 0:
        return 0
    return current * 100 // reference


def charging_state(is_charging: bool, fully_charged: bool) -> ChargingState:
    """Derive the charging state from the two source flags."""
    if is_charging:
        return ChargingState.CHARGING
    if fully_charged:
        return ChargingState.CHARGED
    return ChargingState.DISCHARGING


class FastProbe:
    """Reads percent, charging state, time remaining and sensors.

    Issues one call to the fast source per read. Parsing never fails:
    absent fields fall back to their declared defaults and are reported
    in the reading's ``missing`` set.
    """

    def __init__(
        self,
        executor: CommandExecutor,
        command: Sequence[str] = DEFAULT_FAST_COMMAND,
    ) -> None:
        """Initialize the fast probe.

        Args:
            executor: Command executor used to run the source command
            command: Program and arguments producing ``"Key" = value`` text
        """
        self.executor = executor
        self.command = tuple(command)
        self.scanner = KeyValueScanner(FAST_FIELDS)

    def read(self) -> FastReading:
        """Run the source command and parse its output.

        Returns:
            Parsed FastReading

        Raises:
            ExecutionError: If the command cannot be run
        """
        name, *args = self.command
        output = self.executor.execute(name, args)
        return self.parse(output)

    def parse(self, output: str) -> FastReading:
        """Parse raw fast-source output into a FastReading."""
        result = self.scanner.scan(output)
        if result.missing:
            logger.debug("Fast source missing fields: %s", ", ".join(sorted(result.missing)))

        state = charging_state(result.get("IsCharging"), result.get("FullyCharged"))
        temperature = result.get("Temperature")

        return FastReading(
            percent_charge=percent_charge(result.get("CurrentCapacity"), result.get("MaxCapacity")),
            charging_state=state,
            time_remaining=format_time_remaining(result.get("TimeRemaining"), state),
            temperature_celsius=temperature / 100.0 if temperature is not None else None,
            wattage=result.get("Watts"),
            serial=result.get("Serial"),
            external_connected=result.get("ExternalConnected"),
            missing=self._missing_fields(result),
        )

    @staticmethod
    def _missing_fields(result: ScanResult) -> frozenset[str]:
        return frozenset(
            _FIELD_NAMES[key] for key in result.missing if key in _FIELD_NAMES
        )
