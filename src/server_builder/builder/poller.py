"""
Imaging completion poller.

Imaging runs asynchronously on the control plane. Drives that had an image
applied are queued here, and wait_for_images blocks until every one of them
reports complete.

Policy
Each round asks for info on every queued drive and reads the raw imaging token.
Only the exact token "false" means complete. Anything else, including "queued",
"true" or a missing token, keeps the drive waiting.
Between rounds that leave drives waiting we sleep interval_seconds.

Liveness
max_rounds bounds the wait and raises ImagingTimeout when exceeded.
None waits forever.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

from server_builder.builder.progress import ProgressSink
from server_builder.core.errors import ConfigurationError, ImagingTimeout
from server_builder.core.types import CommandRequest, Drive, RequestKind
from server_builder.factories.drive import DriveFactory

logger = logging.getLogger(__name__)

IMAGING_COMPLETE = "false"


@dataclass(frozen=True)
class PollerConfig:
    """
    interval_seconds
    Sleep between rounds that leave drives waiting.

    max_rounds
    Scan rounds allowed before giving up, at least 1. The default is one hour
    at the default interval. None waits forever.
    """

    interval_seconds: float = 5.0
    max_rounds: Optional[int] = 720

    def __post_init__(self) -> None:
        if self.max_rounds is not None and self.max_rounds < 1:
            raise ConfigurationError(f"max_rounds must be at least 1 or None, got {self.max_rounds}")
        if self.interval_seconds < 0:
            raise ConfigurationError(f"interval_seconds must not be negative, got {self.interval_seconds}")


class ImagingPoller:
    """Queue of drives waiting for imaging, scoped to one build."""

    def __init__(
        self,
        factory: DriveFactory,
        run: Callable[[CommandRequest], list[str]],
        progress: ProgressSink,
        config: PollerConfig | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._factory = factory
        self._run = run
        self._progress = progress
        self._config = config or PollerConfig()
        self._sleep = sleep
        self._queue: list[Drive] = []

    @property
    def pending(self) -> list[Drive]:
        return list(self._queue)

    def enqueue(self, drive: Drive) -> None:
        drive.mark_imaging()
        self._queue.append(drive)

    def clear(self) -> None:
        self._queue = []

    def wait_for_images(self) -> None:
        """Block until every queued drive reports imaging complete."""
        try:
            self._drain()
        finally:
            self.clear()

    def _drain(self) -> None:
        rounds = 0
        while self._queue:
            limit = self._config.max_rounds
            if limit is not None and rounds >= limit:
                raise ImagingTimeout([d.name for d in self._queue], rounds)
            rounds += 1

            self._progress.log("Waiting for drive images to complete...")

            still_waiting: list[Drive] = []
            for drive in self._queue:
                if self._poll(drive):
                    drive.mark_imaging_complete()
                    logger.debug("drive %s imaging complete after %d rounds", drive.name, rounds)
                else:
                    still_waiting.append(drive)
            self._queue = still_waiting

            if self._queue:
                self._sleep(self._config.interval_seconds)

    def _poll(self, drive: Drive) -> bool:
        lines = self._run(self._factory.info(drive))
        token = self._factory.parse_response(drive, lines, RequestKind.is_imaging_complete)
        return token == IMAGING_COMPLETE
