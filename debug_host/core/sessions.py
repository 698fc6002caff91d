"""Live debug session bookkeeping."""

from __future__ import annotations

import enum
import logging
import uuid
from collections.abc import Callable
from typing import Protocol, runtime_checkable

from .models import DebugAdapterExecutable, DebugConfiguration
from .registry import AdapterRegistry

logger = logging.getLogger("debug_host.sessions")


class SessionState(str, enum.Enum):
    CREATED = "created"
    STARTING = "starting"
    RUNNING = "running"
    TERMINATING = "terminating"
    TERMINATED = "terminated"


@runtime_checkable
class Session(Protocol):
    """One running debug interaction backed by an adapter transport."""

    @property
    def id(self) -> str: ...

    @property
    def configuration(self) -> DebugConfiguration: ...

    @property
    def executable(self) -> DebugAdapterExecutable: ...

    @property
    def state(self) -> SessionState: ...

    async def start(self) -> None:
        """Spawn and handshake the adapter; raise on failure."""

    def stop(self) -> None:
        """Request termination; valid in every state, never raises."""

    def on_terminated(self, callback: Callable[[Session], None]) -> Callable[[], None]:
        """Register ``callback`` for the terminated notification; return an unsubscriber."""


class SessionFactory(Protocol):
    def get(
        self,
        session_id: str,
        config: DebugConfiguration,
        executable: DebugAdapterExecutable,
    ) -> Session: ...


LifecycleListener = Callable[[str, Session], None]


class SessionManager:
    """Own the live-session map for one host instance.

    Sessions enter the map in :meth:`create` and leave it through
    :meth:`remove`, which each session triggers from its termination
    notification.
    """

    def __init__(self, registry: AdapterRegistry, default_factory: SessionFactory) -> None:
        if default_factory is None:
            raise ValueError("A default session factory is required")
        self.registry = registry
        self.default_factory = default_factory
        self._sessions: dict[str, Session] = {}
        self._listeners: list[LifecycleListener] = []

    def create(self, config: DebugConfiguration) -> Session:
        session_id = self._new_session_id()
        factory = self.registry.session_factory_for(config.type) or self.default_factory
        executable = self.registry.executable_for(config)
        session = factory.get(session_id, config, executable)
        self._sessions[session_id] = session
        logger.info(
            "session.created",
            extra={
                "session_id": session_id,
                "debug_type": config.type,
                "configuration": config.name,
                "custom_factory": factory is not self.default_factory,
            },
        )
        self._notify("created", session)
        session.on_terminated(lambda _: self.remove(session_id))
        # A session that finished before subscribing never notifies again.
        if session.state is SessionState.TERMINATED:
            self.remove(session_id)
        return session

    def remove(self, session_id: str) -> None:
        session = self._sessions.pop(session_id, None)
        if session is None:
            return
        logger.info("session.removed", extra={"session_id": session_id})
        self._notify("removed", session)

    def find(self, session_id: str) -> Session | None:
        return self._sessions.get(session_id)

    def find_all(self) -> list[Session]:
        return list(self._sessions.values())

    def add_listener(self, callback: LifecycleListener) -> Callable[[], None]:
        self._listeners.append(callback)

        def _remove() -> None:
            try:
                self._listeners.remove(callback)
            except ValueError:  # pragma: no cover - already removed
                pass

        return _remove

    def _new_session_id(self) -> str:
        session_id = uuid.uuid4().hex
        while session_id in self._sessions:  # pragma: no cover - 128-bit collision
            session_id = uuid.uuid4().hex
        return session_id

    def _notify(self, event: str, session: Session) -> None:
        for listener in list(self._listeners):
            try:
                listener(event, session)
            except Exception:
                logger.exception(
                    "session.listener_failed",
                    extra={"session_id": session.id, "event": event},
                )


__all__ = [
    "LifecycleListener",
    "Session",
    "SessionFactory",
    "SessionManager",
    "SessionState",
]
