# src/batmon/utils/time.py
"""Time and duration handling utilities."""

from __future__ import annotations

from datetime import UTC, datetime


class TimeUtils:
    """Time-related utility functions.

    Centralized utilities for working with dates and times:
    - Current time retrieval with proper timezone handling
    - Datetime formatting
    - Minute durations rendered as clock strings
    """

    @staticmethod
    def now_localized() -> datetime:
        """Get current datetime with local timezone.

        Returns:
            Current datetime with local timezone
        """
        return datetime.now(UTC).astimezone()

    @staticmethod
    def format_datetime(dt: datetime, format_string: str) -> str:
        """Format datetime with specified format string.

        Args:
            dt: Datetime to format
            format_string: strftime format string

        Returns:
            Formatted datetime string
        """
        return dt.strftime(format_string)

    @staticmethod
    def minutes_to_clock(minutes: int) -> str:
        """Render a minute count as ``H:MM``.

        Args:
            minutes: Non-negative number of minutes

        Returns:
            Hours (unpadded) and zero-padded minutes, e.g. 125 -> "2:05"
        """
        hours, mins = divmod(minutes, 60)
        return f"{hours}:{mins:02d}"
