"""Probes for the fast (ioreg) and slow (system_profiler) power sources."""

from batmon.probes.fast import FastProbe
from batmon.probes.slow import SlowProbe

__all__ = [
    "FastProbe",
    "SlowProbe",
]
