"""
Drive factory.

Commands
drives create          name <n>, size <bytes>, optional avoid:drives <ids>
drives <id> image <source id>
drives <id> info

Response keys read
drive     remote id
status    remote status
imaging   "false" when complete, "queued" or "true" while imaging
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional

from server_builder.core.errors import ConfigurationError, EntityStateError
from server_builder.core.images import DiskImage, ImageCatalogue
from server_builder.core.lines import format_line, parse_lines
from server_builder.core.types import CommandRequest, Drive, RequestKind
from server_builder.factories.base import ResourceFactory


def _positive_size(drive: Drive) -> int:
    try:
        size = int(drive.size)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"drive {drive.name or '?'} has invalid size {drive.size!r}") from exc
    if size <= 0:
        raise ConfigurationError(f"drive {drive.name} size must be positive, got {size}")
    return size


@dataclass
class DriveFactory(ResourceFactory):
    """
    images
    Catalogue used to resolve a drive's image keyword.
    """

    images: ImageCatalogue = field(default_factory=ImageCatalogue.default)

    def validate(self, drive: Drive) -> None:
        if not drive.name:
            raise ConfigurationError("drive name is required")
        format_line("name", drive.name)
        _positive_size(drive)
        if drive.image:
            self.images.resolve(drive.image)

    def create(self, drive: Drive, avoid_drive_ids: Optional[Iterable[str]] = None) -> CommandRequest:
        self.validate(drive)
        args = [
            format_line("name", drive.name),
            format_line("size", _positive_size(drive)),
        ]
        avoid = list(avoid_drive_ids or [])
        if avoid:
            args.append(format_line("avoid:drives", avoid))
        return CommandRequest("drives create", tuple(args))

    def resolve_image(self, drive: Drive) -> Optional[DiskImage]:
        """Return the image for the drive, or None when no image is requested."""
        if not drive.image:
            return None
        return self.images.resolve(drive.image)

    def image(self, drive: Drive, image: DiskImage) -> CommandRequest:
        drive_id = self._require_identifier(drive)
        return CommandRequest(f"drives {drive_id} image {image.source_id}")

    def info(self, drive: Drive) -> CommandRequest:
        drive_id = self._require_identifier(drive)
        return CommandRequest(f"drives {drive_id} info")

    def parse_response(self, drive: Drive, lines: list[str], kind: RequestKind) -> Optional[str]:
        fields = parse_lines(lines)

        if kind == RequestKind.is_imaging_complete:
            return fields.get("imaging")

        if kind == RequestKind.create:
            drive_id = fields.get("drive")
            if not drive_id:
                raise EntityStateError(f"create response for drive {drive.name} has no drive id")
            drive.set_identifier(drive_id)

        if "status" in fields:
            drive.status = fields["status"]
        return None

    @staticmethod
    def _require_identifier(drive: Drive) -> str:
        if drive.identifier is None:
            raise EntityStateError(f"drive {drive.name} has not been created")
        return drive.identifier
