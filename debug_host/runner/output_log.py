"""Adapter output capture."""

from __future__ import annotations

from collections import deque
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from threading import Lock

__all__ = ["AdapterLog", "OutputChunk"]


@dataclass(slots=True)
class OutputChunk:
    """One line of adapter output."""

    stream: str
    text: str
    timestamp: datetime


OutputListener = Callable[[OutputChunk], None]


class AdapterLog:
    """Append adapter output to ``path`` and forward each chunk to listeners.

    The file stays on disk after the session ends so the output endpoint can
    replay it; chunks written after :meth:`close` are dropped.
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.lines_written = 0
        self._handle = self.path.open("a", encoding="utf-8")
        self._listeners: list[OutputListener] = []
        self._lock = Lock()

    def __enter__(self) -> AdapterLog:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    @property
    def closed(self) -> bool:
        return self._handle.closed

    def close(self) -> None:
        with self._lock:
            if self._handle.closed:
                return
            self._handle.close()
            self._listeners.clear()

    def write(self, text: str, stream: str = "stderr") -> OutputChunk:
        chunk = OutputChunk(stream=stream, text=text, timestamp=datetime.now(UTC))
        with self._lock:
            if self._handle.closed:
                return chunk
            self._handle.write(text)
            self._handle.flush()
            self.lines_written += text.count("\n")
            listeners = tuple(self._listeners)
        for listener in listeners:
            listener(chunk)
        return chunk

    def add_listener(self, callback: OutputListener) -> Callable[[], None]:
        with self._lock:
            self._listeners.append(callback)

        def _remove() -> None:
            with self._lock:
                if callback in self._listeners:
                    self._listeners.remove(callback)

        return _remove

    @staticmethod
    def replay(path: Path, limit: int | None = None) -> Iterator[str]:
        """Yield the lines recorded in ``path``; only the last ``limit`` when given."""

        with Path(path).open("r", encoding="utf-8") as handle:
            if limit is None:
                yield from handle
            else:
                yield from deque(handle, maxlen=max(limit, 0))
