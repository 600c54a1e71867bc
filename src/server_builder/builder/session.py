"""
Build session.

A session remembers every server built so far, keyed by the user chosen name.
Later servers use it to turn an "avoid" list of names into remote ids.

Avoidance is a placement hint, not a correctness requirement, so a name that
was never built is skipped. The miss is logged at DEBUG so it can be traced.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Iterator, Optional

from server_builder.core.types import AvoidanceTargets, Server

logger = logging.getLogger(__name__)


def _append_unique(target: list[str], values: Iterable[Optional[str]]) -> None:
    for value in values:
        if value and value not in target:
            target.append(value)


@dataclass
class BuildSession:
    """Servers built so far, keyed by name."""

    built: dict[str, Server] = field(default_factory=dict)

    def record(self, server: Server) -> None:
        """Add or replace a built server."""
        self.built[server.name] = server

    def get(self, name: str) -> Optional[Server]:
        return self.built.get(name)

    def names(self) -> list[str]:
        return list(self.built.keys())

    def resolve_avoidance(self, names: Iterable[str]) -> AvoidanceTargets:
        """
        Resolve server names into remote server and drive ids.

        Returns the ids of every known server in names and the union of their
        drive ids. Order is first seen, duplicates are dropped.
        """
        server_ids: list[str] = []
        drive_ids: list[str] = []

        for name in names:
            server = self.built.get(name)
            if server is None:
                logger.debug("avoid: no built server named %s, skipping", name)
                continue
            _append_unique(server_ids, [server.identifier])
            _append_unique(drive_ids, server.drive_identifiers())

        return AvoidanceTargets(server_ids=tuple(server_ids), drive_ids=tuple(drive_ids))

    def __iter__(self) -> Iterator[Server]:
        return iter(self.built.values())

    def __len__(self) -> int:
        return len(self.built)
