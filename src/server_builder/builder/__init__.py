"""
Builder package.

This makes the builder folder an explicit package so both Python and mypy
resolve modules consistently.
"""

from server_builder.builder.orchestrator import ServerBuilder
from server_builder.builder.poller import ImagingPoller, PollerConfig
from server_builder.builder.session import BuildSession

__all__ = ["BuildSession", "ImagingPoller", "PollerConfig", "ServerBuilder"]
