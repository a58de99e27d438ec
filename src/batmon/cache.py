"""Lock-guarded cache for the slow health reading."""

from __future__ import annotations

import logging
import threading
from datetime import datetime
from typing import Final

from batmon.errors import ProbeError
from batmon.models import HealthReading
from batmon.probes.slow import SlowProbe
from batmon.utils.time import TimeUtils

logger: Final = logging.getLogger(__name__)


class HealthCache:
    """Holds the most recent slow-probe reading.

    The cached reading never expires on its own. A failed refresh leaves
    the previous reading in place (stale-but-available), so the display
    keeps showing the last good health data.

    Every operation runs under a single lock, so readers never observe a
    partially replaced record even if ``read`` and ``refresh`` are called
    from different threads.
    """

    def __init__(self, probe: SlowProbe) -> None:
        """Initialize an empty cache.

        Args:
            probe: Slow probe used to populate and refresh the cache
        """
        self.probe = probe
        self._lock = threading.Lock()
        self._reading: HealthReading | None = None
        self._last_refreshed: datetime | None = None

    @property
    def has_value(self) -> bool:
        """Whether a reading has been stored."""
        with self._lock:
            return self._reading is not None

    @property
    def last_refreshed(self) -> datetime | None:
        """When the cached reading was last replaced by a successful fetch."""
        with self._lock:
            return self._last_refreshed

    def read(self) -> HealthReading:
        """Return the cached reading, fetching it once on cold start.

        A failed cold-start fetch stores an empty placeholder, so later
        reads do not hit the slow source again before the next refresh.
        """
        with self._lock:
            if self._reading is None:
                logger.info("Health cache empty → fetching from %s", self.probe.source)
                try:
                    self._store(self.probe.read())
                except ProbeError as exc:
                    logger.warning("Initial health fetch failed: %s", exc)
                    self._reading = HealthReading.empty()
            return self._reading

    def refresh(self) -> HealthReading:
        """Fetch a new reading and replace the cached one.

        Returns:
            The newly cached reading

        Raises:
            ProbeError: If the fetch fails; the previous reading is kept
        """
        with self._lock:
            reading = self.probe.read()
            self._store(reading)
            logger.debug("Health cache refreshed (%d cycles)", reading.cycle_count)
            return reading

    def _store(self, reading: HealthReading) -> None:
        self._reading = reading
        self._last_refreshed = TimeUtils.now_localized()
