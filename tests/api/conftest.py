from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from debug_host.api.context import AppContext
from debug_host.api.main import create_app
from debug_host.api.streams import DebugBroker
from debug_host.config import HostSettings
from debug_host.container import build_service
from tests.fakes import FakeContributor, FakeSessionFactory


@pytest.fixture()
def session_factory() -> FakeSessionFactory:
    return FakeSessionFactory()


@pytest.fixture()
def context(settings: HostSettings, session_factory: FakeSessionFactory) -> AppContext:
    broker = DebugBroker()
    service = build_service(
        settings,
        contributors=[FakeContributor()],
        session_factory=session_factory,
        lifecycle_listeners=[broker.lifecycle_listener],
    )
    return AppContext(service=service, settings=settings, debug_broker=broker)


@pytest.fixture()
def app(context: AppContext):
    return create_app(context)


@pytest.fixture()
def client(app):
    with TestClient(app) as test_client:
        yield test_client
