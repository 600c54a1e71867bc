"""
Build runner.

Purpose
- Load a build manifest
- Build every server in manifest order within one session
- Report what was built

This is the composition layer of the system.
It wires executor, factories, poller settings and progress output.

Core builder remains pure.
Runner handles environment configuration.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

from server_builder.builder.orchestrator import ServerBuilder
from server_builder.builder.poller import PollerConfig
from server_builder.builder.progress import ProgressSink
from server_builder.builder.session import BuildSession
from server_builder.core.errors import OrchestratorError
from server_builder.core.serialization import build_report_to_json
from server_builder.core.types import Server
from server_builder.execution.base import CommandExecutor, ExecutorConfig
from server_builder.execution.cli import CliExecutor
from server_builder.execution.http import HttpExecutor
from server_builder.factories.drive import DriveFactory
from server_builder.manifest.base import ManifestSource
from server_builder.manifest.static_source import StaticManifestSource

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RunnerConfig:
    """
    Runner configuration.

    poll_interval_seconds
    Sleep between imaging poll rounds.

    max_poll_rounds
    Poll rounds before a build fails with ImagingTimeout. None waits forever.

    endpoint_url
    When set, commands go to this HTTP endpoint instead of the client binary.

    executor
    Settings for the command line client.
    """

    poll_interval_seconds: float = 5.0
    max_poll_rounds: Optional[int] = 720
    endpoint_url: Optional[str] = None
    executor: ExecutorConfig = ExecutorConfig()


def make_executor(config: RunnerConfig) -> CommandExecutor:
    if config.endpoint_url:
        return HttpExecutor(
            base_url=config.endpoint_url,
            timeout_seconds=config.executor.timeout_seconds,
        )
    return CliExecutor(config=config.executor)


class BuildRunner:
    """
    Builds a whole manifest.

    A failed server aborts the run. Servers built before it stay built and
    remain in the session.
    """

    def __init__(
        self,
        executor: CommandExecutor,
        manifest_source: ManifestSource,
        config: RunnerConfig | None = None,
        progress: ProgressSink | None = None,
        session: BuildSession | None = None,
    ) -> None:
        self._config = config or RunnerConfig()
        self._executor = executor
        self._manifest_source = manifest_source
        self._progress = progress
        self.session = session if session is not None else BuildSession()

    def run(self) -> list[Server]:
        manifest = self._manifest_source.load()

        builder = ServerBuilder(
            executor=self._executor,
            drive_factory=DriveFactory(images=manifest.images),
            poller_config=PollerConfig(
                interval_seconds=self._config.poll_interval_seconds,
                max_rounds=self._config.max_poll_rounds,
            ),
            session=self.session,
        )
        if self._progress is not None:
            builder.set_logger(self._progress)

        built: list[Server] = []
        for server in manifest.servers:
            built.append(builder.build(server))
        return built


def _parse_args(argv: Optional[Sequence[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="server-builder",
        description="Build the servers described in a json manifest.",
    )
    parser.add_argument("manifest", type=Path, help="path to the build manifest")
    parser.add_argument("--endpoint", help="send commands to this HTTP endpoint")
    parser.add_argument("--binary", default=ExecutorConfig.binary, help="control plane client binary")
    parser.add_argument("--poll-interval", type=float, default=5.0, help="seconds between imaging polls")
    parser.add_argument(
        "--max-poll-rounds",
        type=int,
        default=720,
        help="imaging poll rounds before giving up, 0 waits forever",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="[%(asctime)s] %(levelname)s: %(message)s",
    )

    config = RunnerConfig(
        poll_interval_seconds=args.poll_interval,
        max_poll_rounds=args.max_poll_rounds or None,
        endpoint_url=args.endpoint,
        executor=ExecutorConfig(binary=args.binary),
    )
    runner = BuildRunner(
        executor=make_executor(config),
        manifest_source=StaticManifestSource(path=args.manifest),
        config=config,
    )

    try:
        runner.run()
    except OrchestratorError as exc:
        logger.error("build failed: %s", exc)
        print(json.dumps(build_report_to_json(runner.session), indent=2))
        return 1

    print(json.dumps(build_report_to_json(runner.session), indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
