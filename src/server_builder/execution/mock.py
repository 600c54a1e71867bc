"""
In memory control plane.

This executor is used for tests, local simulations and the mock HTTP endpoint.
It behaves like a tiny control plane keyed by remote id.

Features
- Answers drives create, drives <id> image <source>, drives <id> info,
  servers create and servers <id> info with realistic response lines
- Records every call in order
- Reports an imaged drive as queued, then true, for a configurable number of
  info calls before reporting false
- Can inject failures for commands starting with a given prefix
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field

from server_builder.core.errors import ExecutionFailed
from server_builder.core.lines import parse_lines
from server_builder.execution.base import CommandExecutor

USER_ID = "eeeeeee-1111-1111-ffff-6f6f6f6f6f6"


@dataclass
class InMemoryControlPlane(CommandExecutor):
    """
    In memory executor.

    imaging_polls
    Number of info calls on an imaged drive that still report imaging in
    progress. Zero means the first info call already reports complete.

    fail_on
    Command prefixes that raise ExecutionFailed instead of running.

    calls
    Every executed (command, args) pair in order.
    """

    imaging_polls: int = 1
    fail_on: tuple[str, ...] = ()
    ip_prefix: str = "91.203.56."
    calls: list[tuple[str, list[str]]] = field(default_factory=list)
    drives: dict[str, dict[str, str]] = field(default_factory=dict)
    servers: dict[str, dict[str, str]] = field(default_factory=dict)
    _pending_polls: dict[str, int] = field(default_factory=dict)

    def execute(self, command: str, args: list[str]) -> list[str]:
        self.calls.append((command, list(args)))

        for prefix in self.fail_on:
            if command.startswith(prefix):
                raise ExecutionFailed(f"injected failure for {command}")

        words = command.split()
        if words == ["drives", "create"]:
            return self._create_drive(args)
        if words == ["servers", "create"]:
            return self._create_server(args)
        if len(words) == 3 and words[0] == "drives" and words[2] == "info":
            return self._drive_info(words[1])
        if len(words) == 4 and words[0] == "drives" and words[2] == "image":
            return self._image_drive(words[1], words[3])
        if len(words) == 3 and words[0] == "servers" and words[2] == "info":
            return self._server_info(words[1])

        raise ExecutionFailed(f"unknown command: {command}")

    def commands(self) -> list[str]:
        """Executed command strings, in order."""
        return [command for command, _ in self.calls]

    def _create_drive(self, args: list[str]) -> list[str]:
        cfg = parse_lines(args)
        drive_id = str(uuid.uuid4())
        self.drives[drive_id] = {
            "drive": drive_id,
            "encryption:cipher": "aes-xts-plain",
            "name": cfg.get("name", ""),
            "size": cfg.get("size", "0"),
            "status": "active",
            "tier": "disk",
            "user": USER_ID,
        }
        return self._render(self.drives[drive_id])

    def _image_drive(self, drive_id: str, source_id: str) -> list[str]:
        drive = self._require_drive(drive_id)
        drive["imaging"] = "queued"
        drive["image:source"] = source_id
        self._pending_polls[drive_id] = self.imaging_polls
        return []

    def _drive_info(self, drive_id: str) -> list[str]:
        drive = self._require_drive(drive_id)
        remaining = self._pending_polls.get(drive_id, 0)
        if remaining > 0:
            # first poll sees the queued state, later polls see it running
            if remaining < self.imaging_polls:
                drive["imaging"] = "true"
            self._pending_polls[drive_id] = remaining - 1
        else:
            drive["imaging"] = "false"
        return self._render(drive)

    def _create_server(self, args: list[str]) -> list[str]:
        cfg = parse_lines(args)
        for key, value in cfg.items():
            if key.startswith("ide:") and key.count(":") == 2:
                self._require_drive(value)

        server_id = str(uuid.uuid4())
        server = dict(cfg)
        server["server"] = server_id
        server["status"] = "active"
        server["user"] = USER_ID
        if cfg.get("nic:0:dhcp"):
            server["nic:0:dhcp:ip"] = f"{self.ip_prefix}{len(self.servers) + 10}"
        self.servers[server_id] = server
        return self._render(server)

    def _server_info(self, server_id: str) -> list[str]:
        server = self.servers.get(server_id)
        if server is None:
            raise ExecutionFailed(f"no such server: {server_id}")
        return self._render(server)

    def _require_drive(self, drive_id: str) -> dict[str, str]:
        drive = self.drives.get(drive_id)
        if drive is None:
            raise ExecutionFailed(f"no such drive: {drive_id}")
        return drive

    @staticmethod
    def _render(entity: dict[str, str]) -> list[str]:
        return [f"{key} {value}" for key, value in sorted(entity.items())]
