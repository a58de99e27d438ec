# src/batmon/display/protocols.py
from __future__ import annotations

from typing import Protocol, runtime_checkable

from batmon.errors import ProbeError
from batmon.models import PowerSnapshot


@runtime_checkable
class DisplayBridge(Protocol):
    """Protocol defining the interface between the scheduler and a display.

    The scheduler pushes a finished snapshot after every successful tick
    and an error after every failed one. Implementations decide how to
    render them; an error must not discard the last snapshot shown.
    """

    def show_snapshot(self, snapshot: PowerSnapshot) -> None:
        """Render a freshly merged snapshot.

        Args:
            snapshot: Unified power state for this tick
        """
        ...

    def show_error(self, error: ProbeError) -> None:
        """Report a probe failure for the current tick.

        Args:
            error: The error raised by the probe
        """
        ...


class MockDisplay:
    """Mock implementation of DisplayBridge for testing."""

    def __init__(self) -> None:
        self.snapshots: list[PowerSnapshot] = []
        self.errors: list[ProbeError] = []

    def show_snapshot(self, snapshot: PowerSnapshot) -> None:
        """Record the snapshot without rendering it."""
        self.snapshots.append(snapshot)

    def show_error(self, error: ProbeError) -> None:
        """Record the error without rendering it."""
        self.errors.append(error)

    @property
    def last_snapshot(self) -> PowerSnapshot | None:
        return self.snapshots[-1] if self.snapshots else None

    def reset_call_history(self) -> None:
        """Reset the call history for testing."""
        self.snapshots = []
        self.errors = []


def assert_snapshot_shown(mock_display: MockDisplay, count: int | None = None) -> PowerSnapshot:
    """Assert that the display received at least one snapshot.

    Args:
        mock_display: The mock display instance
        count: Exact number of snapshots expected (None to skip check)

    Returns:
        The most recent snapshot, raises AssertionError otherwise
    """
    assert len(mock_display.snapshots) > 0, "Display never received a snapshot"
    if count is not None:
        assert len(mock_display.snapshots) == count, (
            f"Expected {count} snapshots, got {len(mock_display.snapshots)}"
        )
    return mock_display.snapshots[-1]
