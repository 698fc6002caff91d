from __future__ import annotations

import sys
import types

import pytest

from debug_host.adapters import builtin_contributors, load_plugin, load_plugins
from debug_host.config import HostSettings
from debug_host.container import build_service
from tests.fakes import FakeContributor, FakeSessionFactory


@pytest.fixture()
def plugin_module(monkeypatch: pytest.MonkeyPatch) -> types.ModuleType:
    module = types.ModuleType("debug_host_test_plugin")
    module.INSTANCE = FakeContributor("instance")
    module.MANY = [FakeContributor("one"), FakeContributor("two")]
    module.make = lambda: FakeContributor("made")
    module.FakeContributor = FakeContributor
    module.NOT_A_CONTRIBUTOR = 42
    monkeypatch.setitem(sys.modules, "debug_host_test_plugin", module)
    return module


def test_builtin_contributors_follow_settings(settings: HostSettings) -> None:
    contributors = builtin_contributors(settings)
    assert [item.debug_type for item in contributors] == ["debugpy", "gdb", "lldb"]
    assert contributors[0].python == "/usr/bin/python3"


def test_load_plugin_shapes(plugin_module: types.ModuleType) -> None:
    assert [c.debug_type for c in load_plugin("debug_host_test_plugin:INSTANCE")] == ["instance"]
    assert [c.debug_type for c in load_plugin("debug_host_test_plugin:make")] == ["made"]
    assert [c.debug_type for c in load_plugin("debug_host_test_plugin:FakeContributor")] == [
        "mock"
    ]
    assert [
        c.debug_type
        for c in load_plugins(["debug_host_test_plugin:MANY", "debug_host_test_plugin:INSTANCE"])
    ] == ["one", "two", "instance"]


def test_load_plugin_rejects_bad_specs(plugin_module: types.ModuleType) -> None:
    with pytest.raises(ValueError, match="package.module:attribute"):
        load_plugin("debug_host_test_plugin")
    with pytest.raises(TypeError):
        load_plugin("debug_host_test_plugin:NOT_A_CONTRIBUTOR")
    with pytest.raises(ModuleNotFoundError):
        load_plugin("debug_host_missing_plugin:thing")


def test_build_service_registers_builtins_then_plugins(
    settings: HostSettings, plugin_module: types.ModuleType
) -> None:
    settings.plugins = ("debug_host_test_plugin:MANY",)
    service = build_service(settings, session_factory=FakeSessionFactory())
    assert service.registry.list_types() == ["debugpy", "gdb", "lldb", "one", "two"]


def test_build_service_uses_process_factory_by_default(settings: HostSettings) -> None:
    service = build_service(settings, contributors=[FakeContributor()])
    factory = service.sessions.default_factory
    assert type(factory).__name__ == "ProcessSessionFactory"
    assert factory.logs_dir == settings.logs_dir
