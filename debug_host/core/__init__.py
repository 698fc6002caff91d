"""Registry, session manager, and service facade."""

from .errors import (
    ConfigurationRejected,
    DebugHostError,
    DuplicateAdapterType,
    LaunchFailed,
    UnknownAdapterType,
)
from .models import DebugAdapterExecutable, DebugConfiguration
from .registry import AdapterRegistry, DebugAdapterContributor
from .service import DebugService
from .sessions import (
    LifecycleListener,
    Session,
    SessionFactory,
    SessionManager,
    SessionState,
)

__all__ = [
    "AdapterRegistry",
    "ConfigurationRejected",
    "DebugAdapterContributor",
    "DebugAdapterExecutable",
    "DebugConfiguration",
    "DebugHostError",
    "DebugService",
    "DuplicateAdapterType",
    "LaunchFailed",
    "LifecycleListener",
    "Session",
    "SessionFactory",
    "SessionManager",
    "SessionState",
    "UnknownAdapterType",
]
