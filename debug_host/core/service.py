"""Service boundary called by the command/UI layer."""

from __future__ import annotations

import asyncio
import logging
from functools import partial

from .models import DebugConfiguration
from .registry import AdapterRegistry
from .sessions import Session, SessionManager, SessionState

logger = logging.getLogger("debug_host.service")


class DebugService:
    """Asynchronous facade over the registry and the session manager."""

    def __init__(self, registry: AdapterRegistry, sessions: SessionManager) -> None:
        self.registry = registry
        self.sessions = sessions

    async def list_types(self) -> list[str]:
        return self.registry.list_types()

    async def initial_configurations(self, debug_type: str) -> list[DebugConfiguration]:
        return self.registry.initial_configurations(debug_type)

    async def resolve(self, config: DebugConfiguration) -> DebugConfiguration:
        return self.registry.resolve(config)

    async def start(self, config: DebugConfiguration) -> str:
        """Resolve ``config``, create a session, and return its id once started.

        A session whose start fails (or whose caller is cancelled) is removed
        from the live set and asked to stop before the error propagates.
        """

        resolved = self.registry.resolve(config)
        session = self.sessions.create(resolved)
        try:
            await session.start()
        except BaseException:
            logger.warning(
                "session.start_failed",
                extra={"session_id": session.id, "debug_type": resolved.type},
                exc_info=True,
            )
            self.sessions.remove(session.id)
            session.stop()
            raise
        logger.info("session.started", extra={"session_id": session.id})
        return session.id

    async def stop(self, session_id: str | None = None) -> None:
        if session_id is not None:
            session = self.sessions.find(session_id)
            if session is not None:
                session.stop()
            return
        for session in self.sessions.find_all():
            session.stop()

    async def stop_and_wait(self, session_id: str | None = None, *, timeout: float) -> list[str]:
        """Stop like :meth:`stop`, then wait up to ``timeout`` seconds for termination.

        Returns the ids of sessions that were still alive when the wait ended.
        """

        if session_id is not None:
            found = self.sessions.find(session_id)
            targets = [found] if found is not None else []
        else:
            targets = self.sessions.find_all()
        loop = asyncio.get_running_loop()
        waiters: dict[str, asyncio.Future[None]] = {}
        for session in targets:
            if session.state is SessionState.TERMINATED:
                continue
            finished: asyncio.Future[None] = loop.create_future()
            session.on_terminated(partial(_resolve_once, finished))
            waiters[session.id] = finished
            session.stop()
        if waiters:
            await asyncio.wait(waiters.values(), timeout=timeout)
        lingering = [key for key, future in waiters.items() if not future.done()]
        if lingering:
            logger.warning("session.stop_timeout", extra={"session_ids": lingering})
        return lingering

    def find(self, session_id: str) -> Session | None:
        return self.sessions.find(session_id)

    def list_sessions(self) -> list[Session]:
        return self.sessions.find_all()


def _resolve_once(future: asyncio.Future[None], _: Session) -> None:
    if not future.done():
        future.set_result(None)


__all__ = ["DebugService"]
