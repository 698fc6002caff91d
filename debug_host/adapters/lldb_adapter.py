"""Contributor for native binaries debugged through lldb-dap."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar

from debug_host.core import DebugAdapterExecutable, DebugConfiguration, SessionFactory

from .base import adapter_cwd
from .gdb_adapter import NativeLaunchContributor

LLDB_TYPE = "lldb"


@dataclass(slots=True)
class LLDBContributor(NativeLaunchContributor):
    """Describe ``lldb-dap`` adapter processes."""

    lldb_dap_path: str = "lldb-dap"
    debug_type: str = LLDB_TYPE
    session_factory: SessionFactory | None = None
    launch_defaults: ClassVar[dict[str, Any]] = {"stopOnEntry": False}

    def executable_for(self, config: DebugConfiguration) -> DebugAdapterExecutable:
        return DebugAdapterExecutable(command=self.lldb_dap_path, cwd=adapter_cwd(config))


__all__ = ["LLDBContributor", "LLDB_TYPE"]
