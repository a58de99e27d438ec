"""Text and number formatting utilities."""

from __future__ import annotations

from batmon.models import CALCULATING, ChargingState
from batmon.utils.time import TimeUtils

# ioreg reports this when it cannot estimate time remaining yet
TIME_REMAINING_UNKNOWN = 65535


def format_time_remaining(minutes: int | None, state: ChargingState) -> str:
    """Format the raw minutes-remaining value for display.

    Args:
        minutes: Raw TimeRemaining value (None when not reported)
        state: Charging state derived from the same reading

    Returns:
        Empty string when fully charged, the calculating sentinel when the
        source has no estimate (sentinel or negative), else ``H:MM remaining``
    """
    if state is ChargingState.CHARGED:
        return ""
    if minutes is None or minutes < 0 or minutes == TIME_REMAINING_UNKNOWN:
        return CALCULATING
    return f"{TimeUtils.minutes_to_clock(minutes)} remaining"


def format_temperature(celsius: float | None, unit: str = "°C") -> str:
    """Format temperature value with unit.

    Args:
        celsius: Temperature value, or None when unknown
        unit: Temperature unit

    Returns:
        Formatted temperature string
    """
    if celsius is None:
        return "N/A"
    return f"{celsius:.1f}{unit}"


def format_watts(watts: int | str | None) -> str:
    """Format a wattage reading, passing through strings that already carry units."""
    if watts is None or watts == "":
        return "N/A"
    if isinstance(watts, int) or watts.isdigit():
        return f"{watts} W"
    return watts
