"""
Progress narration.

The builder narrates each step in plain text. Lines carry no machine readable
contract; they exist for the operator watching a build.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Protocol


class ProgressSink(Protocol):
    def log(self, message: str) -> None:
        """Record one line of progress."""


@dataclass(frozen=True)
class LoggingProgressSink(ProgressSink):
    """Default sink, forwards narration to a stdlib logger at INFO."""

    logger_name: str = "server_builder.progress"

    def log(self, message: str) -> None:
        logging.getLogger(self.logger_name).info(message)


@dataclass
class RecordingProgressSink(ProgressSink):
    """Keeps narration in memory. Useful in tests and for quiet runs."""

    messages: list[str] = field(default_factory=list)

    def log(self, message: str) -> None:
        self.messages.append(message)
