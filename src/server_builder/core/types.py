"""
Core types.

This file defines the entities and small value types shared across the builder.

Important design choice
Entities are plain data holders. They know nothing about command formats or
the executor. Factories translate them to commands, and the orchestrator moves
them through their lifecycle.

Identifiers are assigned by the control plane. Both Server and Drive accept an
identifier at most once, which keeps a created entity from being silently
rebound to another remote resource.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Iterable, Mapping, Optional

from server_builder.core.errors import ConfigurationError, EntityStateError


def _text(value: Any) -> str:
    """Setting as text, with a missing or null value as ""."""
    return "" if value is None else str(value)


class ImagingStatus(StrEnum):
    """
    Drive imaging lifecycle.

    not_requested
      The drive has no image, so it is usable as soon as it exists.

    in_progress
      An image was applied and completion has not been observed yet.

    complete
      The control plane reported imaging finished.
    """

    not_requested = "not_requested"
    in_progress = "in_progress"
    complete = "complete"


class RequestKind(StrEnum):
    """Which request a response belongs to, used when parsing response lines."""

    create = "create"
    info = "info"
    image = "image"
    is_imaging_complete = "is_imaging_complete"


@dataclass(frozen=True)
class CommandRequest:
    """
    One command for the executor.

    command
    Subcommand words, for example "drives create" or "drives <uuid> info".

    args
    Argument lines in "<key> <value>" form.
    """

    command: str
    args: tuple[str, ...] = ()


@dataclass
class Drive:
    """
    A block storage drive owned by a server.

    name
    User chosen name.

    size
    Requested size in bytes.

    image
    Optional image keyword applied after creation, for example "ubuntu".

    identifier
    Remote id, None until the create response has been parsed.

    imaging
    Imaging lifecycle state, see ImagingStatus.
    """

    name: str
    size: Any = None
    image: Optional[str] = None
    identifier: Optional[str] = None
    status: Optional[str] = None
    imaging: ImagingStatus = ImagingStatus.not_requested

    @classmethod
    def from_config(cls, cfg: Mapping[str, Any]) -> "Drive":
        if not isinstance(cfg, Mapping):
            raise ConfigurationError("drive configuration must be an object")
        image = cfg.get("image")
        return cls(
            name=_text(cfg.get("name")),
            size=cfg.get("size"),
            image=str(image) if image else None,
        )

    def set_identifier(self, identifier: str) -> None:
        if self.identifier is not None and self.identifier != identifier:
            raise EntityStateError(f"drive {self.name} already has identifier {self.identifier}")
        self.identifier = identifier

    def mark_imaging(self) -> None:
        self.imaging = ImagingStatus.in_progress

    def mark_imaging_complete(self) -> None:
        self.imaging = ImagingStatus.complete

    @property
    def is_ready(self) -> bool:
        """True when a server may reference this drive."""
        if self.identifier is None:
            return False
        return not self.image or self.imaging == ImagingStatus.complete


@dataclass
class Server:
    """
    A virtual server and the drives it owns.

    config
    Open ended settings in configuration order, such as cpu, mem, nic:0:model,
    boot and avoid. The drives key is lifted into the drives list.

    drives
    Drives in slot order.

    avoid_server_ids and avoid_drive_ids
    Anti affinity annotations added just before the server is created.
    """

    config: dict[str, Any]
    drives: list[Drive] = field(default_factory=list)
    identifier: Optional[str] = None
    public_ip: Optional[str] = None
    status: Optional[str] = None
    avoid_server_ids: list[str] = field(default_factory=list)
    avoid_drive_ids: list[str] = field(default_factory=list)

    @classmethod
    def from_config(cls, cfg: Mapping[str, Any]) -> "Server":
        if not isinstance(cfg, Mapping):
            raise ConfigurationError("server configuration must be an object")
        config = {str(k): v for k, v in cfg.items() if k != "drives"}
        raw_drives = cfg.get("drives", []) or []
        if not isinstance(raw_drives, list):
            raise ConfigurationError("server drives must be a list")
        return cls(config=config, drives=[Drive.from_config(d) for d in raw_drives])

    @property
    def name(self) -> str:
        return _text(self.config.get("name"))

    def get_config_value(self, key: str, default: Any = None) -> Any:
        return self.config.get(key, default)

    def set_identifier(self, identifier: str) -> None:
        if self.identifier is not None and self.identifier != identifier:
            raise EntityStateError(f"server {self.name} already has identifier {self.identifier}")
        self.identifier = identifier

    def drive_identifiers(self) -> list[str]:
        """Identifiers of drives that have been created, in slot order."""
        return [d.identifier for d in self.drives if d.identifier is not None]

    def avoid_sharing_hardware_with_servers(self, server_ids: Iterable[str]) -> None:
        self.avoid_server_ids = list(server_ids)

    def avoid_sharing_hardware_with_drives(self, drive_ids: Iterable[str]) -> None:
        self.avoid_drive_ids = list(drive_ids)


@dataclass(frozen=True)
class AvoidanceTargets:
    """
    Resolved anti affinity targets.

    server_ids are the avoided servers' own ids.
    drive_ids are the union of their drives' ids.

    Both keep first seen order so generated commands are deterministic.
    """

    server_ids: tuple[str, ...] = ()
    drive_ids: tuple[str, ...] = ()

    @property
    def empty(self) -> bool:
        return not self.server_ids and not self.drive_ids
