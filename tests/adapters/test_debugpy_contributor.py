from __future__ import annotations

from pathlib import Path

import pytest

from debug_host.adapters import DebugpyContributor
from debug_host.core import ConfigurationRejected, DebugConfiguration


def _config(**attributes: object) -> DebugConfiguration:
    return DebugConfiguration(type="debugpy", name="Run", attributes=attributes)


def test_templates_are_debugpy_launches() -> None:
    contributor = DebugpyContributor(python="/opt/python")
    templates = contributor.initial_configurations()
    assert [item.name for item in templates] == ["Python: Current File", "Python: Module"]
    assert {item.type for item in templates} == {"debugpy"}
    for template in templates:
        assert contributor.resolve(template).type == "debugpy"


def test_resolve_fills_launch_defaults() -> None:
    contributor = DebugpyContributor(python="/opt/python")
    resolved = contributor.resolve(_config(module="app.main", args=["--flag"], justMyCode=False))

    assert resolved.get("request") == "launch"
    assert resolved.get("python") == "/opt/python"
    assert resolved.get("args") == ["--flag"]
    assert resolved.get("env") == {}
    assert resolved.get("console") == "internalConsole"
    assert resolved.get("justMyCode") is False
    assert contributor.resolve(resolved) == resolved


@pytest.mark.parametrize(
    ("attributes", "message"),
    [
        ({}, "exactly one of module or program"),
        ({"module": "a", "program": "b.py"}, "exactly one of module or program"),
        ({"program": "b.py", "args": "--flag"}, "'args' must be a list of strings"),
        ({"request": "restart"}, "unsupported request"),
        ({"request": "attach"}, "attach requires processId or connect.port"),
    ],
)
def test_resolve_rejects_invalid_configurations(
    attributes: dict[str, object], message: str
) -> None:
    with pytest.raises(ConfigurationRejected, match=message):
        DebugpyContributor().resolve(_config(**attributes))


def test_resolve_attach_defaults_host() -> None:
    resolved = DebugpyContributor().resolve(_config(request="attach", connect={"port": 5678}))
    assert resolved.get("connect") == {"host": "127.0.0.1", "port": 5678}


def test_executable_runs_debugpy_adapter() -> None:
    contributor = DebugpyContributor(python="/opt/python")
    executable = contributor.executable_for(contributor.resolve(_config(program="app.py")))
    assert executable.argv == ["/opt/python", "-m", "debugpy.adapter"]

    override = contributor.executable_for(_config(program="app.py", python="/venv/bin/python"))
    assert override.command == "/venv/bin/python"


def test_resolve_fills_working_directory(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.chdir(tmp_path)
    contributor = DebugpyContributor(python="/opt/python")

    resolved = contributor.resolve(_config(program="main.py"))
    assert resolved.get("cwd") == str(tmp_path)
    assert contributor.executable_for(resolved).cwd == tmp_path

    explicit = contributor.resolve(_config(program="main.py", cwd="/srv/app"))
    assert explicit.get("cwd") == "/srv/app"

    with pytest.raises(ConfigurationRejected, match="'cwd' must be a non-empty string"):
        contributor.resolve(_config(program="main.py", cwd=7))
