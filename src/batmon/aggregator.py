"""Merge fast and slow readings into a single PowerSnapshot."""

from __future__ import annotations

from datetime import datetime

from batmon.models import FastReading, HealthReading, PowerSnapshot
from batmon.utils.time import TimeUtils

AC_POWER = "AC Power"
BATTERY_POWER = "Battery Power"


def power_source(external_connected: bool | None) -> str | None:
    """Name the power source the way the menu bar does, if known."""
    if external_connected is None:
        return None
    return AC_POWER if external_connected else BATTERY_POWER


def merge(
    fast: FastReading,
    health: HealthReading,
    now: datetime | None = None,
) -> PowerSnapshot:
    """Combine a fresh fast reading with the cached health reading.

    The two sources own disjoint fields, so no conflict resolution is
    needed. The battery serial comes from the fast source and falls back
    to the slow source's model info.

    Args:
        fast: Latest fast-probe reading
        health: Current health-cache reading
        now: Snapshot timestamp (default: current local time)

    Returns:
        Immutable PowerSnapshot
    """
    unknown = set(fast.missing) | set(health.missing)
    serial = fast.serial or health.serial
    if serial is not None:
        unknown.discard("serial")

    return PowerSnapshot(
        percent_charge=fast.percent_charge,
        charging_state=fast.charging_state,
        time_remaining=fast.time_remaining,
        temperature_celsius=fast.temperature_celsius,
        wattage=fast.wattage,
        serial=serial,
        power_source=power_source(fast.external_connected),
        condition=health.condition,
        max_capacity_rating=health.max_capacity_rating,
        cycle_count=health.cycle_count,
        charger_name=health.charger_name,
        charger_wattage=health.charger_wattage,
        unknown_fields=frozenset(unknown),
        last_update=now or TimeUtils.now_localized(),
    )
