"""Default session factory: run the adapter executable as a child process."""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from functools import partial
from pathlib import Path

from debug_host.config import HostSettings
from debug_host.core import (
    DebugAdapterExecutable,
    DebugConfiguration,
    LaunchFailed,
    Session,
    SessionState,
)

from .output_log import AdapterLog, OutputChunk

logger = logging.getLogger("debug_host.runner")

OutputObserver = Callable[[str, OutputChunk], None]

__all__ = [
    "AdapterTransport",
    "OutputObserver",
    "ProcessSession",
    "ProcessSessionFactory",
]


@dataclass(slots=True)
class AdapterTransport:
    """The adapter's stdio pair, handed to whoever speaks the debug protocol."""

    reader: asyncio.StreamReader
    writer: asyncio.StreamWriter


class ProcessSession:
    """A debug session whose adapter is a local child process."""

    def __init__(
        self,
        session_id: str,
        configuration: DebugConfiguration,
        executable: DebugAdapterExecutable,
        *,
        logs_dir: Path,
        base_env: Mapping[str, str] | None = None,
        stop_grace_period: float = 5.0,
        output_observers: Iterable[OutputObserver] = (),
    ) -> None:
        self._id = session_id
        self._configuration = configuration
        self._executable = executable
        self.logs_dir = Path(logs_dir)
        self.base_env = dict(os.environ if base_env is None else base_env)
        self.stop_grace_period = stop_grace_period
        self.output_observers = list(output_observers)
        self.transport: AdapterTransport | None = None
        self.exit_code: int | None = None
        self._state = SessionState.CREATED
        self._process: asyncio.subprocess.Process | None = None
        self._watcher: asyncio.Task[None] | None = None
        self._kill_handle: asyncio.TimerHandle | None = None
        self._log: AdapterLog | None = None
        self._listeners: list[Callable[[Session], None]] = []
        self._terminated = asyncio.Event()

    @property
    def id(self) -> str:
        return self._id

    @property
    def configuration(self) -> DebugConfiguration:
        return self._configuration

    @property
    def executable(self) -> DebugAdapterExecutable:
        return self._executable

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def log_path(self) -> Path:
        return self.logs_dir / self._id / "adapter.log"

    async def start(self) -> None:
        if self._state is not SessionState.CREATED:
            raise LaunchFailed(f"Session {self._id} cannot start while {self._state.value}")
        self._state = SessionState.STARTING
        self._log = AdapterLog(self.log_path)
        for observer in self.output_observers:
            self._log.add_listener(partial(observer, self._id))
        argv = self._executable.argv
        try:
            process = await asyncio.create_subprocess_exec(
                *argv,
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=str(self._executable.cwd) if self._executable.cwd is not None else None,
                env=self._build_env(),
            )
        except OSError as exc:
            self._log.write(f"Failed to start adapter: {exc}\n")
            self._finish(None)
            raise LaunchFailed(f"Failed to start debug adapter '{argv[0]}': {exc}") from exc
        except asyncio.CancelledError:
            self._finish(None)
            raise
        self._process = process
        self._watcher = asyncio.create_task(self._watch(process), name=f"adapter-{self._id}")
        if self._state is SessionState.TERMINATING:
            self._terminate_process()
            raise LaunchFailed(f"Session {self._id} was stopped before it started")
        if process.stdout is None or process.stdin is None:  # pragma: no cover - pipes requested
            raise LaunchFailed(f"Session {self._id} has no adapter stdio")
        self.transport = AdapterTransport(reader=process.stdout, writer=process.stdin)
        self._state = SessionState.RUNNING
        logger.info(
            "adapter.spawned",
            extra={"session_id": self._id, "pid": process.pid, "argv": argv},
        )

    def stop(self) -> None:
        if self._state is SessionState.CREATED:
            self._finish(None)
        elif self._state is SessionState.STARTING:
            self._state = SessionState.TERMINATING
        elif self._state is SessionState.RUNNING:
            self._state = SessionState.TERMINATING
            self._terminate_process()

    def on_terminated(self, callback: Callable[[Session], None]) -> Callable[[], None]:
        self._listeners.append(callback)

        def _remove() -> None:
            try:
                self._listeners.remove(callback)
            except ValueError:  # pragma: no cover - already fired or removed
                pass

        return _remove

    async def wait_terminated(self) -> int | None:
        await self._terminated.wait()
        return self.exit_code

    # ------------------------------------------------------------------ helpers
    async def _watch(self, process: asyncio.subprocess.Process) -> None:
        pump = None
        if process.stderr is not None:
            pump = asyncio.create_task(self._pump(process.stderr))
        exit_code = await process.wait()
        if pump is not None:
            await pump
        self._finish(exit_code)

    async def _pump(self, stderr: asyncio.StreamReader) -> None:
        while True:
            line = await stderr.readline()
            if not line:
                break
            if self._log is not None:
                self._log.write(line.decode("utf-8", errors="replace"))

    def _terminate_process(self) -> None:
        process = self._process
        if process is None or process.returncode is not None:
            return
        try:
            process.terminate()
        except ProcessLookupError:  # pragma: no cover - exited between checks
            return
        loop = asyncio.get_running_loop()
        self._kill_handle = loop.call_later(self.stop_grace_period, self._kill)

    def _kill(self) -> None:
        process = self._process
        if process is None or process.returncode is not None:
            return
        logger.warning("adapter.kill", extra={"session_id": self._id, "pid": process.pid})
        try:
            process.kill()
        except ProcessLookupError:  # pragma: no cover - exited between checks
            pass

    def _finish(self, exit_code: int | None) -> None:
        if self._state is SessionState.TERMINATED:
            return
        self._state = SessionState.TERMINATED
        self.exit_code = exit_code
        if self._kill_handle is not None:
            self._kill_handle.cancel()
            self._kill_handle = None
        if self._log is not None:
            self._log.close()
        self._terminated.set()
        logger.info("adapter.terminated", extra={"session_id": self._id, "exit_code": exit_code})
        listeners, self._listeners = self._listeners, []
        for callback in listeners:
            try:
                callback(self)
            except Exception:
                logger.exception("adapter.listener_failed", extra={"session_id": self._id})

    def _build_env(self) -> dict[str, str]:
        env = dict(self.base_env)
        if self._executable.env:
            env.update({k: str(v) for k, v in self._executable.env.items()})
        env.setdefault("PYTHONUNBUFFERED", "1")
        return env


@dataclass(slots=True)
class ProcessSessionFactory:
    """Build :class:`ProcessSession` objects sharing one logs directory."""

    logs_dir: Path
    stop_grace_period: float = 5.0
    base_env: Mapping[str, str] | None = None
    output_observers: list[OutputObserver] = field(default_factory=list)

    @classmethod
    def from_settings(
        cls,
        settings: HostSettings,
        *,
        output_observers: Iterable[OutputObserver] = (),
    ) -> ProcessSessionFactory:
        return cls(
            logs_dir=settings.logs_dir,
            stop_grace_period=settings.stop_grace_period,
            output_observers=list(output_observers),
        )

    def get(
        self,
        session_id: str,
        config: DebugConfiguration,
        executable: DebugAdapterExecutable,
    ) -> ProcessSession:
        return ProcessSession(
            session_id,
            config,
            executable,
            logs_dir=self.logs_dir,
            base_env=self.base_env,
            stop_grace_period=self.stop_grace_period,
            output_observers=self.output_observers,
        )
