"""Contributor for Python programs debugged through debugpy."""

from __future__ import annotations

import sys
from dataclasses import dataclass

from debug_host.core import (
    ConfigurationRejected,
    DebugAdapterExecutable,
    DebugConfiguration,
    SessionFactory,
)

from .base import adapter_cwd, string_list, string_mapping, template, working_directory

DEBUGPY_TYPE = "debugpy"


@dataclass(slots=True)
class DebugpyContributor:
    """Resolve debugpy configurations and describe the ``debugpy.adapter`` process."""

    python: str = sys.executable
    debug_type: str = DEBUGPY_TYPE
    session_factory: SessionFactory | None = None

    def initial_configurations(self) -> list[DebugConfiguration]:
        return [
            template(
                self.debug_type,
                "Python: Current File",
                request="launch",
                program="${file}",
                console="integratedTerminal",
            ),
            template(self.debug_type, "Python: Module", request="launch", module="app"),
        ]

    def resolve(self, config: DebugConfiguration) -> DebugConfiguration:
        request = config.get("request", "launch")
        if request == "attach":
            return self._resolve_attach(config)
        if request != "launch":
            msg = f"'{config.name}': unsupported request '{request}'"
            raise ConfigurationRejected(msg)
        module = config.get("module")
        program = config.get("program")
        if bool(module) == bool(program):
            msg = f"'{config.name}': exactly one of module or program must be specified"
            raise ConfigurationRejected(msg)
        return config.with_attributes(
            request="launch",
            cwd=working_directory(config),
            args=string_list(config, "args"),
            env=string_mapping(config, "env"),
        ).with_defaults(
            python=self.python,
            console="internalConsole",
            justMyCode=True,
        )

    def executable_for(self, config: DebugConfiguration) -> DebugAdapterExecutable:
        python = config.get("python") or self.python
        if not isinstance(python, str):
            raise ConfigurationRejected(f"'{config.name}': 'python' must be a string")
        return DebugAdapterExecutable(
            command=python,
            args=["-m", "debugpy.adapter"],
            cwd=adapter_cwd(config),
        )

    @staticmethod
    def _resolve_attach(config: DebugConfiguration) -> DebugConfiguration:
        if config.get("processId") is not None:
            return config
        connect = config.get("connect")
        if not isinstance(connect, dict) or not isinstance(connect.get("port"), int):
            msg = f"'{config.name}': attach requires processId or connect.port"
            raise ConfigurationRejected(msg)
        host = connect.get("host") or "127.0.0.1"
        if not isinstance(host, str):
            raise ConfigurationRejected(f"'{config.name}': connect.host must be a string")
        return config.with_attributes(connect={"host": host, "port": connect["port"]})


__all__ = ["DEBUGPY_TYPE", "DebugpyContributor"]
