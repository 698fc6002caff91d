"""In-memory fan-out of session lifecycle and adapter output events."""

from __future__ import annotations

import asyncio
from asyncio import AbstractEventLoop
from collections import OrderedDict, defaultdict, deque
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from threading import Lock
from typing import Any

from debug_host.core import Session
from debug_host.runner import OutputChunk

ALL_SESSIONS = "*"
_HISTORY_LIMIT = 256
_RETAINED_SESSIONS = 64


@dataclass(slots=True)
class DebugEvent:
    session_id: str
    kind: str
    payload: dict[str, Any]
    timestamp: datetime

    def to_payload(self) -> dict[str, Any]:
        return {
            "session_id": self.session_id,
            "kind": self.kind,
            "payload": self.payload,
            "timestamp": self.timestamp.isoformat(),
        }


DebugSubscription = tuple[
    asyncio.Queue[DebugEvent | None],
    AbstractEventLoop,
    Callable[[], None],
    list[DebugEvent],
]


class DebugBroker:
    """Fan-out channel for session events.

    Every event is recorded under its session id and under
    :data:`ALL_SESSIONS`, so a subscriber may follow one session or all.
    Once a session's ``removed`` event is published its channel is retired;
    only the ``retained_sessions`` most recently retired channels keep their
    history, and a retired channel is dropped once nobody follows it.
    """

    def __init__(
        self,
        history_limit: int = _HISTORY_LIMIT,
        retained_sessions: int = _RETAINED_SESSIONS,
    ) -> None:
        self.retained_sessions = retained_sessions
        self._history: dict[str, deque[DebugEvent]] = defaultdict(
            lambda: deque(maxlen=history_limit)
        )
        self._subscribers: dict[
            str, list[tuple[asyncio.Queue[DebugEvent | None], AbstractEventLoop]]
        ] = defaultdict(list)
        self._retired: OrderedDict[str, None] = OrderedDict()
        self._lock = Lock()

    def publish(self, session_id: str, kind: str, payload: dict[str, Any]) -> DebugEvent:
        event = DebugEvent(
            session_id=session_id,
            kind=kind,
            payload=dict(payload),
            timestamp=datetime.now(UTC),
        )
        with self._lock:
            subscribers = []
            for channel in (session_id, ALL_SESSIONS):
                self._history[channel].append(event)
                subscribers.extend(self._subscribers.get(channel, []))
            if kind == "removed" and session_id != ALL_SESSIONS:
                self._retired[session_id] = None
                self._retired.move_to_end(session_id)
                self._prune_locked()
        for queue, loop in subscribers:
            loop.call_soon_threadsafe(queue.put_nowait, event)
        return event

    def history(self, channel: str) -> list[DebugEvent]:
        with self._lock:
            return list(self._history.get(channel, ()))

    def channels(self) -> list[str]:
        """Return the channels that currently hold history."""

        with self._lock:
            return list(self._history)

    def subscribe_with_history(self, channel: str) -> DebugSubscription:
        """Subscribe to ``channel`` and return the history recorded before it."""

        loop = asyncio.get_running_loop()
        queue: asyncio.Queue[DebugEvent | None] = asyncio.Queue()
        with self._lock:
            history = list(self._history.get(channel, ()))
            self._subscribers[channel].append((queue, loop))

        def _unsubscribe() -> None:
            with self._lock:
                subscribers = self._subscribers.get(channel)
                if subscribers and (queue, loop) in subscribers:
                    subscribers.remove((queue, loop))
                if not subscribers:
                    self._subscribers.pop(channel, None)
                self._prune_locked()
            loop.call_soon_threadsafe(queue.put_nowait, None)

        return queue, loop, _unsubscribe, history

    def _prune_locked(self) -> None:
        excess = len(self._retired) - self.retained_sessions
        for session_id in list(self._retired):
            if excess <= 0:
                break
            if self._subscribers.get(session_id):
                continue
            del self._retired[session_id]
            self._history.pop(session_id, None)
            self._subscribers.pop(session_id, None)
            excess -= 1

    def lifecycle_listener(self, event: str, session: Session) -> None:
        """Publish :class:`~debug_host.core.SessionManager` lifecycle events."""

        self.publish(
            session.id,
            event,
            {
                "type": session.configuration.type,
                "name": session.configuration.name,
                "state": session.state.value,
            },
        )

    def output_observer(self, session_id: str, chunk: OutputChunk) -> None:
        """Publish adapter output captured by the runner."""

        self.publish(session_id, "output", {"stream": chunk.stream, "text": chunk.text})


__all__ = ["ALL_SESSIONS", "DebugBroker", "DebugEvent", "DebugSubscription"]
