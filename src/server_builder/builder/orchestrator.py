"""
Build orchestrator.

This is the core of the package. One call to build turns a configured server
into real resources:

1) validate server and drives, before anything is executed
2) resolve the avoid list against the session
3) create every drive, applying an image where one is requested
4) wait until every imaged drive reports complete
5) create the server with the drive ids and avoidance annotations
6) record the server in the session

Every command blocks. Errors propagate unchanged and abort the build.
There is no rollback: drives already created stay on the control plane.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Optional

from server_builder.builder.poller import ImagingPoller, PollerConfig
from server_builder.builder.progress import LoggingProgressSink, ProgressSink
from server_builder.builder.session import BuildSession
from server_builder.core.types import AvoidanceTargets, CommandRequest, Drive, RequestKind, Server
from server_builder.execution.base import CommandExecutor
from server_builder.factories.drive import DriveFactory
from server_builder.factories.server import ServerFactory

logger = logging.getLogger(__name__)


def _avoid_names(value: Any) -> list[str]:
    """Accept a list of names or a whitespace separated string."""
    if value is None:
        return []
    if isinstance(value, str):
        return value.split()
    return [str(v) for v in value]


class ServerBuilder:
    """
    Orchestrates drive and server creation through the factories.

    executor
    Runs commands against the control plane.

    session
    Default session for build calls that do not pass one. One builder
    instance is one session unless the caller manages sessions itself.

    sleep
    Used between polling rounds. Injected by tests.
    """

    def __init__(
        self,
        executor: CommandExecutor,
        server_factory: ServerFactory | None = None,
        drive_factory: DriveFactory | None = None,
        poller_config: PollerConfig | None = None,
        session: BuildSession | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._executor = executor
        self._server_factory = server_factory or ServerFactory()
        self._drive_factory = drive_factory or DriveFactory()
        self._poller_config = poller_config or PollerConfig()
        self._sleep = sleep
        self.session = session if session is not None else BuildSession()
        self._progress: ProgressSink = LoggingProgressSink()

    def set_logger(self, sink: ProgressSink) -> None:
        """Redirect progress narration."""
        self._progress = sink

    def build(self, server: Server, session: Optional[BuildSession] = None) -> Server:
        """Create the server and its drives, then record it in the session."""
        if session is None:
            session = self.session

        self._validate(server)

        targets = AvoidanceTargets()
        avoid = _avoid_names(server.get_config_value("avoid"))
        if avoid:
            targets = session.resolve_avoidance(avoid)

        poller = ImagingPoller(
            factory=self._drive_factory,
            run=self._run,
            progress=self._progress,
            config=self._poller_config,
            sleep=self._sleep,
        )
        self._build_drives(server.drives, targets.drive_ids, poller)
        poller.wait_for_images()

        self._build_server(server, targets)

        session.record(server)
        logger.info("built server %s as %s", server.name, server.identifier)
        return server

    def _validate(self, server: Server) -> None:
        self._server_factory.validate(server)
        for drive in server.drives:
            self._drive_factory.validate(drive)

    def _run(self, request: CommandRequest) -> list[str]:
        self._progress.log(f"  [running {request.command}]")
        return self._executor.execute(request.command, list(request.args))

    def _build_drives(
        self,
        drives: list[Drive],
        avoid_drive_ids: tuple[str, ...],
        poller: ImagingPoller,
    ) -> None:
        for drive in drives:
            request = self._drive_factory.create(drive, avoid_drive_ids)

            self._progress.log(f"Creating drive {drive.name}")
            lines = self._run(request)
            self._drive_factory.parse_response(drive, lines, RequestKind.create)

            self._create_image_on_drive(drive, poller)

    def _create_image_on_drive(self, drive: Drive, poller: ImagingPoller) -> None:
        image = self._drive_factory.resolve_image(drive)
        if image is None:
            return

        self._progress.log(f"Creating image {image.keyword} on drive {drive.name}")
        self._run(self._drive_factory.image(drive, image))
        poller.enqueue(drive)

    def _build_server(self, server: Server, targets: AvoidanceTargets) -> None:
        if targets.server_ids:
            server.avoid_sharing_hardware_with_servers(targets.server_ids)
        if targets.drive_ids:
            server.avoid_sharing_hardware_with_drives(targets.drive_ids)

        request = self._server_factory.create(server)

        self._progress.log(f"Creating server {server.name}")
        lines = self._run(request)
        self._server_factory.parse_response(server, lines, RequestKind.create)
