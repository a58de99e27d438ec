"""Common utility functions and helpers for the batmon package."""

from batmon.utils.time import TimeUtils

__all__ = [
    "TimeUtils",
]
