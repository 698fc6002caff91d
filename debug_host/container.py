"""Assemble a :class:`DebugService` from settings."""

from __future__ import annotations

from collections.abc import Iterable

from debug_host.adapters import builtin_contributors, load_plugins
from debug_host.config import HostSettings
from debug_host.core import (
    AdapterRegistry,
    DebugAdapterContributor,
    DebugService,
    LifecycleListener,
    SessionFactory,
    SessionManager,
)
from debug_host.runner import OutputObserver, ProcessSessionFactory


def build_service(
    settings: HostSettings,
    *,
    contributors: Iterable[DebugAdapterContributor] | None = None,
    session_factory: SessionFactory | None = None,
    output_observers: Iterable[OutputObserver] = (),
    lifecycle_listeners: Iterable[LifecycleListener] = (),
) -> DebugService:
    """Build the registry, session manager, and service for one host instance.

    Without explicit ``contributors`` the built-in adapters are registered
    first, followed by every plugin named in ``settings.plugins``.
    """

    if contributors is None:
        contributors = [*builtin_contributors(settings), *load_plugins(settings.plugins)]
    registry = AdapterRegistry(contributors)
    if session_factory is None:
        session_factory = ProcessSessionFactory.from_settings(
            settings, output_observers=output_observers
        )
    manager = SessionManager(registry, session_factory)
    for listener in lifecycle_listeners:
        manager.add_listener(listener)
    return DebugService(registry, manager)


__all__ = ["build_service"]
