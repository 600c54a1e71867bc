"""
Command line executor.

Runs the control plane client as a subprocess:

<binary> -c <command words>

Argument lines are written to stdin, one per line, and the response lines are
read from stdout. A non zero exit status is a failed command.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass

from server_builder.core.errors import ExecutionFailed
from server_builder.core.lines import split_output
from server_builder.execution.base import CommandExecutor, ExecutorConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CliExecutor(CommandExecutor):
    """Subprocess based executor."""

    config: ExecutorConfig = ExecutorConfig()

    def execute(self, command: str, args: list[str]) -> list[str]:
        argv = [self.config.binary, "-c", *command.split()]
        stdin = "\n".join(args) + "\n" if args else ""
        logger.debug("exec %s with %d argument lines", " ".join(argv), len(args))

        try:
            proc = subprocess.run(
                argv,
                input=stdin,
                capture_output=True,
                text=True,
                timeout=self.config.timeout_seconds,
                check=False,
            )
        except FileNotFoundError as exc:
            raise ExecutionFailed(f"client binary not found: {self.config.binary}") from exc
        except subprocess.TimeoutExpired as exc:
            raise ExecutionFailed(
                f"{command} timed out after {self.config.timeout_seconds} seconds"
            ) from exc

        if proc.returncode != 0:
            detail = (proc.stderr or proc.stdout or "").strip()
            raise ExecutionFailed(f"{command} exited with status {proc.returncode}: {detail}")

        return split_output(proc.stdout)
