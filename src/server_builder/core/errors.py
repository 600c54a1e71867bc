"""
Error taxonomy.

We separate error types so callers can react correctly.
Example:
ConfigurationError should block before any command is executed for the entity.
ExecutionFailed means the control plane did not complete a command.
ImagingTimeout means a drive never reported imaging complete in time.
"""


class OrchestratorError(Exception):
    """Base class for all builder exceptions."""


class ConfigurationError(OrchestratorError):
    """Raised when a server or drive configuration is invalid or out of bounds."""


class ExecutionFailed(OrchestratorError):
    """Raised when the executor could not complete a command."""


class EntityStateError(OrchestratorError):
    """Raised when an entity is used in a state that breaks its invariants."""


class ImagingTimeout(OrchestratorError):
    """Raised when drives are still imaging after the poller's round limit."""

    def __init__(self, pending: list[str], rounds: int) -> None:
        self.pending = list(pending)
        self.rounds = rounds
        names = ", ".join(self.pending)
        super().__init__(f"drive imaging not complete after {rounds} rounds: {names}")
