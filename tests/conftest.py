from datetime import datetime, timezone
from pathlib import Path

import pytest

from batmon.controller import BatteryMonitor
from batmon.display.protocols import MockDisplay

DATA_DIR = Path(__file__).parent / "data"

FIXED_TIME = datetime(2025, 5, 3, 14, 30, tzinfo=timezone.utc)


@pytest.fixture
def fixed_time() -> datetime:
    return FIXED_TIME


@pytest.fixture
def fast_output() -> str:
    return (DATA_DIR / "ioreg_battery.txt").read_text()


@pytest.fixture
def slow_output() -> str:
    return (DATA_DIR / "system_profiler_power.json").read_text()


@pytest.fixture
def mock_display() -> MockDisplay:
    return MockDisplay()


@pytest.fixture
def monitor(fast_output: str, slow_output: str, mock_display: MockDisplay) -> BatteryMonitor:
    return BatteryMonitor.create_for_testing(
        fast_output=fast_output,
        slow_output=slow_output,
        display=mock_display,
    )
