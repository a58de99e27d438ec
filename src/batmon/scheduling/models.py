"""Data models for scheduling and refresh settings."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from enum import Enum


class TickKind(Enum):
    """The three inputs the scheduler reacts to."""

    FAST = "fast"
    SLOW = "slow"
    MANUAL = "manual"


@dataclass
class RefreshSettings:
    """Polling cadence for the two power sources."""

    fast_interval: timedelta = timedelta(seconds=2)
    slow_interval: timedelta = timedelta(seconds=60)
