"""Host settings loaded from TOML with environment overrides."""

from __future__ import annotations

import os
import sys
import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

_CONFIG_FILENAME = "config.toml"
_ENV_HOME = "DEBUG_HOST_HOME"
_ENV_LOGS = "DEBUG_HOST_LOGS"
_ENV_PYTHON = "DEBUG_HOST_PYTHON"
_ENV_GDB = "DEBUG_HOST_GDB"
_ENV_LLDB_DAP = "DEBUG_HOST_LLDB_DAP"
_ENV_PLUGINS = "DEBUG_HOST_PLUGINS"
_ENV_HOST = "DEBUG_HOST_HOST"
_ENV_PORT = "DEBUG_HOST_PORT"


def _home_dir() -> Path:
    custom = os.environ.get(_ENV_HOME)
    return Path(custom) if custom else Path.home() / ".debug-host"


@dataclass(slots=True)
class HostSettings:
    """User-configurable host settings."""

    logs_dir: Path = field(default_factory=lambda: _home_dir() / "logs")
    python: str = sys.executable
    gdb_path: str = "gdb"
    lldb_dap_path: str = "lldb-dap"
    plugins: tuple[str, ...] = ()
    stop_grace_period: float = 5.0
    host: str = "127.0.0.1"
    port: int = 8765

    @property
    def shutdown_timeout(self) -> float:
        """Seconds to wait after a stop: the grace period plus time for the kill."""

        return self.stop_grace_period + max(self.stop_grace_period, 0.5)

    @classmethod
    def from_toml(cls, path: Path) -> HostSettings:
        data = tomllib.loads(Path(path).read_text("utf-8"))
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> HostSettings:
        defaults = cls()
        paths = data.get("paths", {})
        adapters = data.get("adapters", {})
        sessions = data.get("sessions", {})
        server = data.get("server", {})
        return cls(
            logs_dir=Path(paths.get("logs", defaults.logs_dir)),
            python=str(adapters.get("python", defaults.python)),
            gdb_path=str(adapters.get("gdb", defaults.gdb_path)),
            lldb_dap_path=str(adapters.get("lldb_dap", defaults.lldb_dap_path)),
            plugins=tuple(adapters.get("plugins", defaults.plugins)),
            stop_grace_period=float(sessions.get("stop_grace_period", defaults.stop_grace_period)),
            host=str(server.get("host", defaults.host)),
            port=int(server.get("port", defaults.port)),
        )

    def merged_with_env(self, environ: dict[str, str] | None = None) -> HostSettings:
        """Return a copy that applies ``DEBUG_HOST_*`` overrides."""

        env = os.environ if environ is None else environ
        plugins = env.get(_ENV_PLUGINS)
        port = env.get(_ENV_PORT)
        return replace(
            self,
            logs_dir=Path(env[_ENV_LOGS]) if env.get(_ENV_LOGS) else self.logs_dir,
            python=env.get(_ENV_PYTHON) or self.python,
            gdb_path=env.get(_ENV_GDB) or self.gdb_path,
            lldb_dap_path=env.get(_ENV_LLDB_DAP) or self.lldb_dap_path,
            plugins=(
                tuple(item.strip() for item in plugins.split(",") if item.strip())
                if plugins is not None
                else self.plugins
            ),
            host=env.get(_ENV_HOST) or self.host,
            port=int(port) if port else self.port,
        )


def config_path() -> Path:
    """Return the path of the default settings file."""

    return _home_dir() / _CONFIG_FILENAME


def load_settings(path: Path | None = None) -> HostSettings:
    """Load settings from ``path`` (or the default file) plus environment overrides."""

    path = Path(path) if path is not None else config_path()
    settings = HostSettings.from_toml(path) if path.exists() else HostSettings()
    return settings.merged_with_env()


__all__ = ["HostSettings", "config_path", "load_settings"]
