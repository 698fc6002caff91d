"""Built-in debug adapter contributors and plugin loading."""

from __future__ import annotations

import importlib
from collections.abc import Iterable

from debug_host.config import HostSettings
from debug_host.core import DebugAdapterContributor

from .debugpy_adapter import DEBUGPY_TYPE, DebugpyContributor
from .gdb_adapter import GDB_TYPE, GDBContributor, NativeLaunchContributor
from .lldb_adapter import LLDB_TYPE, LLDBContributor


def builtin_contributors(settings: HostSettings) -> list[DebugAdapterContributor]:
    return [
        DebugpyContributor(python=settings.python),
        GDBContributor(gdb_path=settings.gdb_path),
        LLDBContributor(lldb_dap_path=settings.lldb_dap_path),
    ]


def load_plugin(spec: str) -> list[DebugAdapterContributor]:
    """Import ``module:attribute`` and return the contributors it provides.

    The attribute may be a contributor, a zero-argument callable returning
    one or more contributors, or an iterable of contributors.
    """

    module_name, sep, attribute = spec.partition(":")
    if not sep or not module_name or not attribute:
        raise ValueError(f"Plugin '{spec}' must look like 'package.module:attribute'")
    target = getattr(importlib.import_module(module_name), attribute)
    if isinstance(target, type) or (
        callable(target) and not isinstance(target, DebugAdapterContributor)
    ):
        target = target()
    if isinstance(target, DebugAdapterContributor):
        return [target]
    if isinstance(target, Iterable):
        contributors = list(target)
        for item in contributors:
            if not isinstance(item, DebugAdapterContributor):
                raise TypeError(f"Plugin '{spec}' provided a non-contributor: {item!r}")
        return contributors
    raise TypeError(f"Plugin '{spec}' does not provide debug adapter contributors")


def load_plugins(specs: Iterable[str]) -> list[DebugAdapterContributor]:
    contributors: list[DebugAdapterContributor] = []
    for spec in specs:
        contributors.extend(load_plugin(spec))
    return contributors


__all__ = [
    "DEBUGPY_TYPE",
    "DebugpyContributor",
    "GDBContributor",
    "GDB_TYPE",
    "LLDBContributor",
    "LLDB_TYPE",
    "NativeLaunchContributor",
    "builtin_contributors",
    "load_plugin",
    "load_plugins",
]
