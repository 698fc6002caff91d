"""Contributor for native binaries debugged through GDB's DAP interpreter."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar

from debug_host.core import DebugAdapterExecutable, DebugConfiguration, SessionFactory

from .base import (
    adapter_cwd,
    require_string,
    string_list,
    string_mapping,
    template,
    working_directory,
)

GDB_TYPE = "gdb"


class NativeLaunchContributor:
    """Launch validation shared by the native debugger contributors."""

    debug_type: str
    launch_defaults: ClassVar[dict[str, Any]] = {}

    def initial_configurations(self) -> list[DebugConfiguration]:
        return [
            template(
                self.debug_type,
                f"{self.debug_type.upper()}: Launch",
                request="launch",
                program="${workspaceFolder}/a.out",
                args=[],
            )
        ]

    def resolve(self, config: DebugConfiguration) -> DebugConfiguration:
        require_string(config, "program")
        return config.with_attributes(
            request="launch",
            cwd=working_directory(config),
            args=string_list(config, "args"),
            env=string_mapping(config, "env"),
        ).with_defaults(**self.launch_defaults)


@dataclass(slots=True)
class GDBContributor(NativeLaunchContributor):
    """Describe ``gdb --interpreter=dap`` adapter processes."""

    gdb_path: str = "gdb"
    debug_type: str = GDB_TYPE
    session_factory: SessionFactory | None = None
    launch_defaults: ClassVar[dict[str, Any]] = {"stopAtBeginningOfMainSubprogram": False}

    def executable_for(self, config: DebugConfiguration) -> DebugAdapterExecutable:
        return DebugAdapterExecutable(
            command=self.gdb_path,
            args=["--interpreter=dap", "--quiet"],
            cwd=adapter_cwd(config),
        )


__all__ = ["GDBContributor", "GDB_TYPE", "NativeLaunchContributor"]
