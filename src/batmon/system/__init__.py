"""System module for running the external power commands."""

from batmon.system.executor import CommandExecutor, FakeExecutor, SubprocessExecutor

__all__ = [
    "CommandExecutor",
    "FakeExecutor",
    "SubprocessExecutor",
]
