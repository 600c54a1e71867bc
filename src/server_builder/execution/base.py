"""
Execution interfaces.

Goal
Define the one capability the builder needs from the outside world without
binding it to a transport:

run command X with argument lines Y and get back a list of response lines.

Design notes
Executors block until the command completes.
Any failure is raised as ExecutionFailed, never returned as output.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


class CommandExecutor(Protocol):
    """
    Executor interface expected by the builder.

    execute
    command holds the subcommand words, for example "drives create".
    args holds "<key> <value>" lines.
    Returns the non blank response lines.
    """

    def execute(self, command: str, args: list[str]) -> list[str]:
        """Run one command and return its response lines."""


@dataclass(frozen=True)
class ExecutorConfig:
    """
    Executor configuration.

    binary
    Command line client used by the subprocess executor.

    timeout_seconds
    Upper bound for a single command, applied by every real transport.
    """

    binary: str = "elastichosts"
    timeout_seconds: float = 300.0
