from datetime import datetime

import pytest

from batmon.models import CALCULATING, ChargingState
from batmon.utils.formatting import (
    TIME_REMAINING_UNKNOWN,
    format_temperature,
    format_time_remaining,
    format_watts,
)
from batmon.utils.time import TimeUtils


@pytest.mark.parametrize(
    "minutes, state, expected",
    [
        (125, ChargingState.DISCHARGING, "2:05 remaining"),
        (0, ChargingState.DISCHARGING, "0:00 remaining"),
        (600, ChargingState.CHARGING, "10:00 remaining"),
        (TIME_REMAINING_UNKNOWN, ChargingState.DISCHARGING, CALCULATING),
        (TIME_REMAINING_UNKNOWN, ChargingState.CHARGING, CALCULATING),
        (None, ChargingState.DISCHARGING, CALCULATING),
        (TIME_REMAINING_UNKNOWN, ChargingState.CHARGED, ""),
        (45, ChargingState.CHARGED, ""),
        (-5, ChargingState.DISCHARGING, CALCULATING),
        (-115, ChargingState.CHARGING, CALCULATING),
    ],
)
def test_format_time_remaining(minutes: int | None, state: ChargingState, expected: str) -> None:
    assert format_time_remaining(minutes, state) == expected


@pytest.mark.parametrize("celsius, expected", [(30.12, "30.1°C"), (0.0, "0.0°C"), (None, "N/A")])
def test_format_temperature(celsius: float | None, expected: str) -> None:
    assert format_temperature(celsius) == expected


@pytest.mark.parametrize(
    "watts, expected",
    [(61, "61 W"), ("96", "96 W"), ("96W", "96W"), (None, "N/A"), ("", "N/A")],
)
def test_format_watts(watts: int | str | None, expected: str) -> None:
    assert format_watts(watts) == expected


def test_minutes_to_clock() -> None:
    assert TimeUtils.minutes_to_clock(61) == "1:01"
    assert TimeUtils.minutes_to_clock(5) == "0:05"


def test_now_localized_is_aware() -> None:
    assert TimeUtils.now_localized().tzinfo is not None


def test_format_datetime() -> None:
    dt = datetime(2025, 5, 3, 14, 30, 5)
    assert TimeUtils.format_datetime(dt, "%H:%M:%S") == "14:30:05"
