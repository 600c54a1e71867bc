"""
Resource factory interfaces.

A factory knows the command format for one resource kind. It has two jobs:
1) turn an entity into a CommandRequest
2) read response lines back into the entity

Factories never execute anything, which keeps them trivial to test.
"""

from __future__ import annotations

from typing import Any, Protocol

from server_builder.core.types import CommandRequest, RequestKind


class ResourceFactory(Protocol):
    """
    Shared factory interface.

    validate
    Raise ConfigurationError when the entity cannot be built as configured.

    info
    Request the current remote state of a created entity.

    parse_response
    Mutate the entity from response lines. Some request kinds return a scalar
    read from the response instead.
    """

    def validate(self, entity: Any) -> None:
        """Check the entity configuration."""

    def info(self, entity: Any) -> CommandRequest:
        """Build the info request for a created entity."""

    def parse_response(self, entity: Any, lines: list[str], kind: RequestKind) -> Any:
        """Apply response lines to the entity."""
