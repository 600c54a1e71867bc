"""
Static manifest source.

Reads a local json file describing the servers to build, in build order.
An optional images object adds to or overrides the default image catalogue.

Schema example
{
  "images": {"ubuntu": "a2d1e8c0-9b4b-4f0e-8e3a-6f1b0c5d7e21"},
  "servers": [
    {
      "name": "web1",
      "cpu": "500",
      "mem": "256",
      "nic:0:model": "e1000",
      "nic:0:dhcp": "auto",
      "boot": "ide:0:0",
      "drives": [{"name": "web1-root", "size": 1000000000, "image": "ubuntu"}]
    },
    {
      "name": "web2",
      "avoid": ["web1"],
      ...
    }
  ]
}

Every image keyword is checked against the catalogue while loading, so a typo
fails here instead of after other servers were already built.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from server_builder.core.errors import ConfigurationError
from server_builder.core.images import DEFAULT_IMAGES, ImageCatalogue
from server_builder.core.types import Server
from server_builder.manifest.base import BuildManifest, ManifestSource


def _catalogue_from(raw: Any) -> ImageCatalogue:
    mapping = dict(DEFAULT_IMAGES)
    if raw is None:
        return ImageCatalogue.from_mapping(mapping)
    if not isinstance(raw, dict):
        raise ConfigurationError("manifest images must be an object")
    mapping.update({str(k): str(v) for k, v in raw.items()})
    return ImageCatalogue.from_mapping(mapping)


@dataclass(frozen=True)
class StaticManifestSource(ManifestSource):
    """Load a build manifest from a local json file."""

    path: Path

    def load(self) -> BuildManifest:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise ConfigurationError(f"cannot read manifest {self.path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ConfigurationError("manifest must be a json object")

        images = _catalogue_from(data.get("images"))

        raw_servers = data.get("servers", [])
        if not isinstance(raw_servers, list):
            raise ConfigurationError("manifest servers must be a list")

        servers: list[Server] = []
        seen: set[str] = set()
        for raw in raw_servers:
            server = Server.from_config(raw)
            if server.name in seen:
                raise ConfigurationError(f"duplicate server name {server.name}")
            seen.add(server.name)
            images.validate(d.image for d in server.drives if d.image)
            servers.append(server)

        return BuildManifest(servers=servers, images=images)
