"""External command execution for the power probes."""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Sequence
from typing import Final, Protocol, runtime_checkable

from batmon.errors import ExecutionError

logger: Final = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS: Final = 10.0


@runtime_checkable
class CommandExecutor(Protocol):
    """Protocol for running a named external program."""

    def execute(self, name: str, args: Sequence[str]) -> str:
        """Run a command and return its standard output.

        Args:
            name: Program to run
            args: Arguments passed to the program

        Returns:
            Raw textual output

        Raises:
            ExecutionError: If the command cannot be launched or fails
        """
        ...


class SubprocessExecutor:
    """Runs commands with ``subprocess.run`` under a hard timeout."""

    def __init__(self, timeout: float = DEFAULT_TIMEOUT_SECONDS) -> None:
        """Initialize with a per-command timeout.

        Args:
            timeout: Seconds before a running command is killed
        """
        self.timeout = timeout

    def execute(self, name: str, args: Sequence[str]) -> str:
        """Run ``name args...`` and return stdout.

        Raises:
            ExecutionError: On missing binary, non-zero exit or timeout
        """
        cmd = [name, *args]
        logger.debug("Running %s", " ".join(cmd))
        try:
            result = subprocess.run(
                cmd,
                check=True,
                capture_output=True,
                text=True,
                errors="replace",
                timeout=self.timeout,
            )
        except FileNotFoundError as exc:
            raise ExecutionError(name, "command not found", cmd, original_error=exc) from exc
        except subprocess.TimeoutExpired as exc:
            raise ExecutionError(
                name,
                f"timed out after {self.timeout:g}s",
                cmd,
                original_error=exc,
                timed_out=True,
            ) from exc
        except subprocess.CalledProcessError as exc:
            stderr = (exc.stderr or "").strip()
            message = f"exited with status {exc.returncode}"
            if stderr:
                message = f"{message}: {stderr}"
            raise ExecutionError(name, message, cmd, exc.returncode, exc) from exc
        except OSError as exc:
            raise ExecutionError(name, f"could not be started: {exc}", cmd, original_error=exc) from exc

        return result.stdout


class FakeExecutor:
    """In-memory executor returning canned output, for tests and dry runs."""

    def __init__(
        self,
        outputs: dict[str, str] | None = None,
        failures: dict[str, ExecutionError] | None = None,
    ) -> None:
        """Initialize with canned outputs.

        Args:
            outputs: Mapping of program name to the stdout it returns
            failures: Mapping of program name to the error it raises
        """
        self.outputs: dict[str, str] = dict(outputs or {})
        self.failures: dict[str, ExecutionError] = dict(failures or {})
        self.calls: list[list[str]] = []

    def execute(self, name: str, args: Sequence[str]) -> str:
        """Record the call and return or raise the canned result."""
        self.calls.append([name, *args])
        if name in self.failures:
            raise self.failures[name]
        if name not in self.outputs:
            raise ExecutionError(name, "command not found", [name, *args])
        return self.outputs[name]

    def call_count(self, name: str) -> int:
        """Return how many times a program was executed."""
        return sum(1 for call in self.calls if call[0] == name)

    def reset_call_history(self) -> None:
        """Reset the call history for testing."""
        self.calls = []
