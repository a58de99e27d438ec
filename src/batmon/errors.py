"""Exception classes for power probe interactions.

This module defines a small hierarchy of exception classes for handling
the two ways a probe can fail: the external command could not be run at
all, or it ran but produced output in an unexpected shape.
"""

from __future__ import annotations

from typing import Optional, Sequence


class ProbeError(Exception):
    """Error while collecting readings from a power data source.

    Carries the name of the source that failed so the display and logs
    can tell the fast and slow sources apart.
    """

    def __init__(self, source: str, message: str) -> None:
        """Initialize the exception.

        Args:
            source: Name of the data source (e.g. "ioreg", "system_profiler")
            message: Human-readable error message
        """
        super().__init__(f"[{source}] {message}")
        self.source: str = source
        self.message: str = message


class ExecutionError(ProbeError):
    """Raised when an external command cannot be launched or run."""

    def __init__(
        self,
        source: str,
        message: str,
        command: Optional[Sequence[str]] = None,
        returncode: Optional[int] = None,
        original_error: Optional[Exception] = None,
        timed_out: bool = False,
    ) -> None:
        """Initialize with execution failure details.

        Args:
            source: Name of the command that failed
            message: Description of the failure
            command: Full argument vector that was executed
            returncode: Exit status when the process ran but failed
            original_error: The original exception that was caught
            timed_out: True when the command was killed for exceeding its timeout
        """
        super().__init__(source, message)
        self.command = list(command) if command is not None else []
        self.returncode = returncode
        self.original_error = original_error
        self.timed_out = timed_out


class ParseError(ProbeError):
    """Raised when command output is not in the expected shape."""

    def __init__(
        self, source: str, message: str, original_error: Optional[Exception] = None
    ) -> None:
        """Initialize with parsing error details.

        Args:
            source: Name of the source whose output could not be parsed
            message: Description of the parsing error
            original_error: The original exception that was caught
        """
        super().__init__(source, message)
        self.original_error = original_error
