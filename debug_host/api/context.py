"""Application context helpers shared across routers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import cast

from fastapi import Request, WebSocket
from starlette.datastructures import State

from debug_host.api.streams import DebugBroker
from debug_host.config import HostSettings, load_settings
from debug_host.container import build_service
from debug_host.core import DebugService


@dataclass(slots=True)
class AppContext:
    """Container for shared application dependencies."""

    service: DebugService
    settings: HostSettings
    debug_broker: DebugBroker


def build_context(settings: HostSettings | None = None) -> AppContext:
    """Wire a service whose lifecycle and output events feed a :class:`DebugBroker`."""

    settings = settings or load_settings()
    broker = DebugBroker()
    service = build_service(
        settings,
        output_observers=[broker.output_observer],
        lifecycle_listeners=[broker.lifecycle_listener],
    )
    return AppContext(service=service, settings=settings, debug_broker=broker)


def _context_from(state: State) -> AppContext:
    context = getattr(state, "context", None)
    if context is None:  # pragma: no cover - create_app always sets it
        raise RuntimeError("Application context missing")
    return cast(AppContext, context)


def get_app_context(request: Request) -> AppContext:
    """Return the configured :class:`AppContext`."""

    return _context_from(request.app.state)


def get_websocket_context(websocket: WebSocket) -> AppContext:
    return _context_from(websocket.app.state)


__all__ = ["AppContext", "build_context", "get_app_context", "get_websocket_context"]
