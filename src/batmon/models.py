"""Typed models for battery readings and the merged power snapshot.

The fast source (ioreg) and the slow source (system_profiler) each yield
a partial reading; the aggregator merges both into a PowerSnapshot that
the display layer renders.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from batmon.utils.time import TimeUtils

NOT_AVAILABLE = "N/A"
CALCULATING = "Calculating…"


class ChargingState(Enum):
    """Charging state derived from the fast source's flags."""

    CHARGING = "Charging"
    DISCHARGING = "Discharging"
    CHARGED = "Charged"
    UNKNOWN = "Unknown"


class FastReading(BaseModel):
    """Volatile readings from the low-latency source."""

    model_config = ConfigDict(frozen=True)

    percent_charge: int = 0
    charging_state: ChargingState = ChargingState.UNKNOWN
    time_remaining: str = CALCULATING
    temperature_celsius: float | None = None
    wattage: int | None = None
    serial: str | None = None
    external_connected: bool | None = None

    # Snapshot field names that fell back to a default
    missing: frozenset[str] = frozenset()


class HealthReading(BaseModel):
    """Slowly-changing health and identity readings from the slow source."""

    model_config = ConfigDict(frozen=True)

    condition: str = NOT_AVAILABLE
    max_capacity_rating: str = NOT_AVAILABLE
    cycle_count: int = 0
    charger_name: str = NOT_AVAILABLE
    charger_wattage: str = NOT_AVAILABLE
    serial: str | None = None

    missing: frozenset[str] = frozenset()

    @classmethod
    def empty(cls) -> HealthReading:
        """Return a placeholder reading used before any fetch has succeeded."""
        return cls(missing=frozenset(HEALTH_FIELDS))

    @property
    def is_empty(self) -> bool:
        """Check if every health field fell back to its default.

        Returns:
            True when no health field was resolved from the source
        """
        return HEALTH_FIELDS <= self.missing


HEALTH_FIELDS: frozenset[str] = frozenset(
    {"condition", "max_capacity_rating", "cycle_count", "charger_name", "charger_wattage"}
)


class PowerSnapshot(BaseModel):
    """Unified, immutable view of the power subsystem.

    Combines the latest fast reading with the cached health reading.
    Fields the sources did not report keep their documented defaults
    and are listed in ``unknown_fields`` so consumers can tell
    "unknown" apart from a measured zero.
    """

    model_config = ConfigDict(frozen=True)

    # Fast source
    percent_charge: int
    charging_state: ChargingState
    time_remaining: str
    temperature_celsius: float | None = None
    wattage: int | None = None
    serial: str | None = None
    power_source: str | None = None

    # Slow source
    condition: str = NOT_AVAILABLE
    max_capacity_rating: str = NOT_AVAILABLE
    cycle_count: int = 0
    charger_name: str = NOT_AVAILABLE
    charger_wattage: str = NOT_AVAILABLE

    unknown_fields: frozenset[str] = frozenset()
    last_update: datetime = Field(default_factory=TimeUtils.now_localized)

    @property
    def formatted_percent(self) -> str:
        """Return formatted battery percentage string."""
        return f"{self.percent_charge}%"
