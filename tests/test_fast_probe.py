import pytest

from batmon.errors import ExecutionError
from batmon.models import CALCULATING, ChargingState
from batmon.probes.fast import FastProbe, charging_state, percent_charge
from batmon.system.executor import FakeExecutor


def make_probe(output: str) -> FastProbe:
    return FastProbe(FakeExecutor({"ioreg": output}))


def battery_text(**fields: object) -> str:
    """Build ioreg-style output from keyword fields."""
    lines = []
    for key, value in fields.items():
        if isinstance(value, bool):
            value = "Yes" if value else "No"
        elif isinstance(value, str):
            value = f'"{value}"'
        lines.append(f'      "{key}" = {value}')
    return "{\n" + "\n".join(lines) + "\n}\n"


@pytest.mark.parametrize(
    "current, reference, expected",
    [
        (57, 60, 95),
        (60, 60, 100),
        (0, 60, 0),
        (1, 3, 33),
        (70, 60, 116),  # not clamped
        (57, 0, 0),
    ],
)
def test_percent_charge(current: int, reference: int, expected: int) -> None:
    assert percent_charge(current, reference) == expected


@pytest.mark.parametrize(
    "is_charging, fully_charged, expected",
    [
        (True, False, ChargingState.CHARGING),
        (True, True, ChargingState.CHARGING),
        (False, True, ChargingState.CHARGED),
        (False, False, ChargingState.DISCHARGING),
    ],
)
def test_charging_state(is_charging: bool, fully_charged: bool, expected: ChargingState) -> None:
    assert charging_state(is_charging, fully_charged) is expected


def test_parse_full_sample(fast_output: str) -> None:
    reading = make_probe(fast_output).read()

    assert reading.percent_charge == 95
    assert reading.charging_state is ChargingState.DISCHARGING
    assert reading.time_remaining == "2:05 remaining"
    assert reading.temperature_celsius == pytest.approx(30.12)
    assert reading.wattage == 61
    assert reading.serial == "F5D12345ABCD"
    assert reading.external_connected is False
    assert reading.missing == frozenset()


def test_time_remaining_sentinel_while_discharging() -> None:
    text = battery_text(CurrentCapacity=50, MaxCapacity=100, IsCharging=False, TimeRemaining=65535)
    assert make_probe(text).read().time_remaining == CALCULATING


def test_time_remaining_empty_when_fully_charged() -> None:
    text = battery_text(
        CurrentCapacity=100, MaxCapacity=100, IsCharging=False, FullyCharged=True, TimeRemaining=65535
    )
    reading = make_probe(text).read()
    assert reading.charging_state is ChargingState.CHARGED
    assert reading.time_remaining == ""


def test_time_remaining_empty_when_charged_with_estimate() -> None:
    text = battery_text(IsCharging=False, FullyCharged=True, TimeRemaining=30)
    assert make_probe(text).read().time_remaining == ""


def test_negative_time_remaining_is_calculating() -> None:
    text = battery_text(IsCharging=False, TimeRemaining=-115)
    assert make_probe(text).read().time_remaining == CALCULATING


def test_time_remaining_while_charging() -> None:
    text = battery_text(IsCharging=True, TimeRemaining=61)
    reading = make_probe(text).read()
    assert reading.charging_state is ChargingState.CHARGING
    assert reading.time_remaining == "1:01 remaining"


def test_missing_optional_fields_are_none() -> None:
    text = battery_text(CurrentCapacity=30, MaxCapacity=60, IsCharging=False, TimeRemaining=90)
    reading = make_probe(text).read()

    assert reading.percent_charge == 50
    assert reading.temperature_celsius is None
    assert reading.wattage is None
    assert reading.serial is None
    assert reading.external_connected is None
    assert {"temperature_celsius", "wattage", "serial", "power_source"} <= reading.missing
    # FullyCharged is optional and does not count as missing
    assert "charging_state" not in reading.missing


def test_empty_output_degrades_to_defaults() -> None:
    reading = make_probe("").read()
    assert reading.percent_charge == 0
    assert reading.charging_state is ChargingState.DISCHARGING
    assert reading.time_remaining == CALCULATING
    assert "percent_charge" in reading.missing


def test_zero_temperature_is_a_measurement() -> None:
    reading = make_probe(battery_text(Temperature=0)).read()
    assert reading.temperature_celsius == 0.0
    assert "temperature_celsius" not in reading.missing


def test_runs_configured_command() -> None:
    executor = FakeExecutor({"ioreg": ""})
    FastProbe(executor).read()
    assert executor.calls == [["ioreg", "-rn", "AppleSmartBattery"]]


def test_execution_error_propagates() -> None:
    executor = FakeExecutor(failures={"ioreg": ExecutionError("ioreg", "command not found")})
    with pytest.raises(ExecutionError):
        FastProbe(executor).read()
