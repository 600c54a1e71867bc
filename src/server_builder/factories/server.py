"""
Server factory.

Commands
servers create     every configured setting as "<key> <value>" in configuration
                   order, then one slot line per drive, then optional
                   avoid:servers and avoid:drives lines
servers <id> info

Drives attach to IDE slots in order: ide:0:0, ide:0:1, ide:1:0, ide:1:1.
A server needs a name, a boot device and between one and four drives.

Response keys read
server          remote id
nic:0:dhcp:ip   public address
status          remote status
"""

from __future__ import annotations

from dataclasses import dataclass

from server_builder.core.errors import ConfigurationError, EntityStateError
from server_builder.core.lines import format_line, parse_lines
from server_builder.core.types import CommandRequest, RequestKind, Server
from server_builder.factories.base import ResourceFactory

DRIVE_SLOTS: tuple[str, ...] = ("ide:0:0", "ide:0:1", "ide:1:0", "ide:1:1")

MANDATORY_SETTINGS: tuple[str, ...] = ("name", "boot")

# settings consumed by the builder rather than passed through
RESERVED_SETTINGS: frozenset[str] = frozenset({"drives", "avoid"})

PUBLIC_IP_KEY = "nic:0:dhcp:ip"


def _setting_lines(server: Server) -> list[str]:
    """Pass through settings as argument lines, in configuration order."""
    return [
        format_line(key, value)
        for key, value in server.config.items()
        if key not in RESERVED_SETTINGS and value is not None
    ]


@dataclass(frozen=True)
class ServerFactory(ResourceFactory):
    """
    slots
    Addressable drive slots, in attach order.
    """

    slots: tuple[str, ...] = DRIVE_SLOTS

    def validate(self, server: Server) -> None:
        for key in MANDATORY_SETTINGS:
            if not server.get_config_value(key):
                raise ConfigurationError(f"server {server.name or '?'} is missing {key}")

        count = len(server.drives)
        if count == 0:
            raise ConfigurationError(f"server {server.name} needs at least one drive")
        if count > len(self.slots):
            raise ConfigurationError(
                f"server {server.name} has {count} drives, only {len(self.slots)} slots available"
            )

        _setting_lines(server)

    def create(self, server: Server) -> CommandRequest:
        self.validate(server)

        args = _setting_lines(server)

        for slot, drive in zip(self.slots, server.drives):
            if not drive.is_ready:
                raise EntityStateError(f"drive {drive.name} is not ready for server {server.name}")
            args.append(format_line(slot, drive.identifier))

        if server.avoid_server_ids:
            args.append(format_line("avoid:servers", server.avoid_server_ids))
        if server.avoid_drive_ids:
            args.append(format_line("avoid:drives", server.avoid_drive_ids))

        return CommandRequest("servers create", tuple(args))

    def info(self, server: Server) -> CommandRequest:
        if server.identifier is None:
            raise EntityStateError(f"server {server.name} has not been created")
        return CommandRequest(f"servers {server.identifier} info")

    def parse_response(self, server: Server, lines: list[str], kind: RequestKind) -> None:
        fields = parse_lines(lines)

        if kind == RequestKind.create:
            server_id = fields.get("server")
            if not server_id:
                raise EntityStateError(f"create response for server {server.name} has no server id")
            server.set_identifier(server_id)

        if fields.get(PUBLIC_IP_KEY):
            server.public_ip = fields[PUBLIC_IP_KEY]
        if "status" in fields:
            server.status = fields["status"]
