from datetime import datetime
from pathlib import Path

import click
import pytest
import typer

from batmon.aggregator import AC_POWER, merge
from batmon.display.console import ConsoleDisplay, TemplateRenderer
from batmon.display.protocols import DisplayBridge
from batmon.errors import ExecutionError
from batmon.models import ChargingState, FastReading, HealthReading, PowerSnapshot
from batmon.settings import ApplicationSettings, UserSettings


@pytest.fixture
def snapshot(fixed_time: datetime) -> PowerSnapshot:
    fast = FastReading(
        percent_charge=95,
        charging_state=ChargingState.DISCHARGING,
        time_remaining="2:05 remaining",
        temperature_celsius=30.12,
        wattage=61,
        serial="F5D12345ABCD",
        external_connected=False,
    )
    health = HealthReading(
        condition="Good",
        max_capacity_rating="95%",
        cycle_count=312,
        charger_name="96W USB-C Power Adapter",
        charger_wattage="96",
    )
    return merge(fast, health, now=fixed_time)


@pytest.fixture
def display() -> ConsoleDisplay:
    return ConsoleDisplay(clear_screen=False)


def test_render_contains_all_fields(display: ConsoleDisplay, snapshot: PowerSnapshot) -> None:
    text = click.unstyle(display.render(snapshot))

    assert text.startswith("Battery Monitor\n===============\n")
    assert "Charge:       95%" in text
    assert "Status:       Discharging" in text
    assert "Time:         2:05 remaining" in text
    assert "Source:       Battery Power" in text
    assert "Temperature:  30.1°C" in text
    assert "Wattage:      61 W" in text
    assert "Condition:    Good" in text
    assert "Cycles:       312" in text
    assert "Max Cap:      95%" in text
    assert "Charger:      96W USB-C Power Adapter" in text
    assert "Wattage:      96 W" in text
    assert "Serial:       F5D12345ABCD" in text
    assert "Updated 14:30:00" in text
    assert "Error" not in text


def test_render_unknown_values(display: ConsoleDisplay, fixed_time: datetime) -> None:
    fast = FastReading(charging_state=ChargingState.CHARGED, time_remaining="")
    snap = merge(fast, HealthReading.empty(), now=fixed_time)
    text = click.unstyle(display.render(snap))

    assert "Time:         -" in text
    assert "Temperature:  N/A" in text
    assert "Source:       N/A" in text
    assert "Cycles:       0" in text
    assert "Serial:       N/A" in text


def test_low_battery_is_red(snapshot: PowerSnapshot) -> None:
    settings = ApplicationSettings(UserSettings(low_battery_percent=20))
    display = ConsoleDisplay(settings, clear_screen=False)
    low = snapshot.model_copy(update={"percent_charge": 19})

    context = display.build_context(low)
    assert context["low_battery"] is True
    assert context["percent"] == typer.style("19%", fg=typer.colors.RED, bold=True)

    context = display.build_context(snapshot)
    assert context["low_battery"] is False
    assert context["percent"] == typer.style("95%", fg=typer.colors.GREEN, bold=True)


def test_low_battery_threshold_is_configurable(snapshot: PowerSnapshot) -> None:
    settings = ApplicationSettings(UserSettings(low_battery_percent=50))
    display = ConsoleDisplay(settings, clear_screen=False)

    assert display.build_context(snapshot.model_copy(update={"percent_charge": 45}))["low_battery"]
    assert not display.build_context(snapshot.model_copy(update={"percent_charge": 50}))["low_battery"]


def test_show_snapshot_prints(
    display: ConsoleDisplay, snapshot: PowerSnapshot, capsys: pytest.CaptureFixture[str]
) -> None:
    display.show_snapshot(snapshot)

    out = capsys.readouterr().out
    assert "Charge:       95%" in out
    assert display.last_snapshot is snapshot


def test_error_keeps_last_snapshot(
    display: ConsoleDisplay, snapshot: PowerSnapshot, capsys: pytest.CaptureFixture[str]
) -> None:
    display.show_snapshot(snapshot)
    capsys.readouterr()

    display.show_error(ExecutionError("ioreg", "command not found"))

    out = capsys.readouterr().out
    assert "Charge:       95%" in out
    assert "Error: [ioreg] command not found" in out
    assert display.last_snapshot is snapshot


def test_error_without_snapshot(display: ConsoleDisplay, capsys: pytest.CaptureFixture[str]) -> None:
    display.show_error(ExecutionError("ioreg", "timed out after 10s", timed_out=True))

    captured = capsys.readouterr()
    assert "Error: [ioreg] timed out after 10s" in captured.err
    assert captured.out == ""


def test_power_source_rendered(display: ConsoleDisplay, snapshot: PowerSnapshot) -> None:
    on_ac = snapshot.model_copy(update={"power_source": AC_POWER})
    assert "Source:       AC Power" in click.unstyle(display.render(on_ac))


def test_renderer_filters(tmp_path: Path, snapshot: PowerSnapshot) -> None:
    (tmp_path / "mini.j2").write_text("{{ t|temperature }} {{ w|watts }} {{ d|strftime('%H:%M') }}")
    renderer = TemplateRenderer(tmp_path, "mini.j2")

    assert renderer.render_status(t=21.0, w=None, d=snapshot.last_update) == "21.0°C N/A 14:30"


def test_console_display_is_a_display_bridge(display: ConsoleDisplay) -> None:
    assert isinstance(display, DisplayBridge)
