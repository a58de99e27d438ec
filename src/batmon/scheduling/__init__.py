"""Scheduler package for the battery monitor."""

from __future__ import annotations

import logging
import queue
import threading
import time
from collections.abc import Callable
from typing import TYPE_CHECKING, Final

from batmon.errors import ProbeError
from batmon.models import PowerSnapshot
from batmon.scheduling.models import RefreshSettings, TickKind

if TYPE_CHECKING:
    from batmon.controller import BatteryMonitor
    from batmon.display.protocols import DisplayBridge

logger: Final = logging.getLogger(__name__)

__all__ = ["RefreshSettings", "Scheduler", "TickKind"]


class Scheduler:
    """Drives the fast and slow polling cycles plus manual refreshes.

    A single cooperative loop multiplexes three inputs:
    - Fast tick: poll the fast source, merge with the health cache and
      push the snapshot to the display (or the error, on failure)
    - Slow tick: refresh the health cache; nothing is displayed until
      the next fast tick picks up the new values
    - Manual refresh: handled exactly like a fast tick, immediately

    Ticks never overlap: each probe call runs to completion inside the
    loop before the next input is considered. The next due time of a
    timer is measured from when its handler returned.
    """

    def __init__(
        self,
        monitor: BatteryMonitor,
        display: DisplayBridge,
        refresh: RefreshSettings | None = None,
        clock: Callable[[], float] = time.monotonic,
        wait: Callable[[float], TickKind | None] | None = None,
    ) -> None:
        """Initialize the scheduler.

        Args:
            monitor: Controller owning the probes and the health cache
            display: Receiver of snapshot and error events
            refresh: Polling cadence (default: 2 s fast, 60 s slow)
            clock: Monotonic clock in seconds
            wait: Blocks up to the given seconds for a manual request;
                defaults to waiting on the internal request queue
        """
        self.monitor = monitor
        self.display = display
        self.refresh = refresh or RefreshSettings()
        self.clock = clock
        self._wait = wait or self._next_request
        self._requests: queue.Queue[TickKind | None] = queue.Queue()
        self._stopped = threading.Event()

        self.next_fast: float | None = None
        self.next_slow: float | None = None
        self.error_streak = 0
        self.ticks_handled = 0

    # ── inputs from outside the loop ────────────────────────────────────────
    def request_refresh(self) -> None:
        """Ask the loop to poll the fast source right away (thread-safe)."""
        self._requests.put(TickKind.MANUAL)

    def stop(self) -> None:
        """Stop issuing ticks; the loop exits after the current tick."""
        self._stopped.set()
        self._requests.put(None)

    @property
    def stopped(self) -> bool:
        return self._stopped.is_set()

    # ── tick handlers ───────────────────────────────────────────────────────
    def fast_tick(self) -> PowerSnapshot | None:
        """Poll the fast source and publish the merged snapshot.

        Returns:
            The published snapshot, or None if the probe failed
        """
        try:
            snapshot = self.monitor.poll()
        except ProbeError as exc:
            self.error_streak += 1
            logger.warning("Fast probe failed (%d in a row): %s", self.error_streak, exc)
            self.display.show_error(exc)
            return None

        self.error_streak = 0
        self.display.show_snapshot(snapshot)
        return snapshot

    def slow_tick(self) -> bool:
        """Refresh the health cache; failures only get logged.

        Returns:
            True if the cache was updated
        """
        try:
            self.monitor.refresh_health()
        except ProbeError as exc:
            logger.warning("Health refresh failed, keeping cached values: %s", exc)
            return False
        return True

    def manual_refresh(self) -> PowerSnapshot | None:
        """Handle an operator-triggered refresh."""
        logger.debug("Manual refresh requested")
        return self.fast_tick()

    # ── loop ────────────────────────────────────────────────────────────────
    def run(self, once: bool = False, max_ticks: int | None = None) -> None:
        """Run the polling loop until stopped.

        Args:
            once: Run a single fast tick, then return
            max_ticks: Return after this many handled ticks (any kind)
        """
        fast_secs = self.refresh.fast_interval.total_seconds()
        slow_secs = self.refresh.slow_interval.total_seconds()

        if once:
            self._handle(TickKind.FAST)
            return

        start = self.clock()
        self.next_fast = start
        self.next_slow = start + slow_secs
        logger.info(
            "Polling fast source every %gs, slow source every %gs", fast_secs, slow_secs
        )

        while not self.stopped:
            delay = max(0.0, min(self.next_fast, self.next_slow) - self.clock())
            request = self._wait(delay)
            if self.stopped:
                break

            if request is TickKind.MANUAL:
                self._handle(TickKind.MANUAL)
            else:
                # Slow first, so a coinciding fast tick sees the fresh cache
                if self.clock() >= self.next_slow:
                    self._handle(TickKind.SLOW)
                    self.next_slow = self.clock() + slow_secs
                if not self._limit_reached(max_ticks) and self.clock() >= self.next_fast:
                    self._handle(TickKind.FAST)
                    self.next_fast = self.clock() + fast_secs

            if self._limit_reached(max_ticks):
                break

        logger.info("Scheduler stopped after %d ticks", self.ticks_handled)

    def _handle(self, kind: TickKind) -> None:
        if kind is TickKind.SLOW:
            self.slow_tick()
        elif kind is TickKind.MANUAL:
            self.manual_refresh()
        else:
            self.fast_tick()
        self.ticks_handled += 1

    def _limit_reached(self, max_ticks: int | None) -> bool:
        return max_ticks is not None and self.ticks_handled >= max_ticks

    def _next_request(self, timeout: float) -> TickKind | None:
        try:
            if timeout <= 0:
                return self._requests.get_nowait()
            return self._requests.get(timeout=timeout)
        except queue.Empty:
            return None
