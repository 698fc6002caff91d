"""Error taxonomy shared by the registry, the session manager, and the service."""

from __future__ import annotations


class DebugHostError(Exception):
    """Base class for errors raised by the debug host."""


class UnknownAdapterType(DebugHostError, LookupError):
    """Raised when a lookup is keyed by a debug type nobody registered."""

    def __init__(self, debug_type: str) -> None:
        super().__init__(f"Debug adapter '{debug_type}' isn't registered.")
        self.debug_type = debug_type


class DuplicateAdapterType(DebugHostError, ValueError):
    """Raised at startup when two contributors claim the same debug type."""

    def __init__(self, debug_type: str) -> None:
        super().__init__(f"Debug adapter '{debug_type}' is registered more than once.")
        self.debug_type = debug_type


class ConfigurationRejected(DebugHostError, ValueError):
    """Raised by contributors when a configuration fails validation."""


class LaunchFailed(DebugHostError, RuntimeError):
    """Raised when an adapter process cannot be spawned or handshaken."""


__all__ = [
    "ConfigurationRejected",
    "DebugHostError",
    "DuplicateAdapterType",
    "LaunchFailed",
    "UnknownAdapterType",
]
