"""Shared pytest fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from debug_host.config import HostSettings
from debug_host.core import AdapterRegistry, DebugService, SessionManager
from tests.fakes import FakeContributor, FakeSessionFactory


@pytest.fixture()
def contributor() -> FakeContributor:
    return FakeContributor()


@pytest.fixture()
def default_factory() -> FakeSessionFactory:
    return FakeSessionFactory()


@pytest.fixture()
def registry(contributor: FakeContributor) -> AdapterRegistry:
    return AdapterRegistry([contributor])


@pytest.fixture()
def manager(registry: AdapterRegistry, default_factory: FakeSessionFactory) -> SessionManager:
    return SessionManager(registry, default_factory)


@pytest.fixture()
def service(registry: AdapterRegistry, manager: SessionManager) -> DebugService:
    return DebugService(registry, manager)


@pytest.fixture()
def settings(tmp_path: Path) -> HostSettings:
    return HostSettings(
        logs_dir=tmp_path / "logs", python="/usr/bin/python3", stop_grace_period=0.05
    )
