"""
Manifest source interface.

Goal
Keep the runner independent of where server definitions come from.

We keep the interface narrow so it is easy to mock in tests.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

from server_builder.core.images import ImageCatalogue
from server_builder.core.types import Server


@dataclass(frozen=True)
class BuildManifest:
    """
    servers
    Servers in build order.

    images
    Catalogue every image keyword in servers resolved against.
    """

    servers: list[Server]
    images: ImageCatalogue = field(default_factory=ImageCatalogue.default)


class ManifestSource(Protocol):
    """
    Manifest source interface.

    load returns servers in build order with a validated image catalogue.
    """

    def load(self) -> BuildManifest:
        """Load the build manifest."""
