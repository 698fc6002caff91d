from __future__ import annotations

import pytest

from debug_host.core import (
    AdapterRegistry,
    DebugConfiguration,
    LaunchFailed,
    SessionManager,
    SessionState,
    UnknownAdapterType,
)
from tests.fakes import FakeContributor, FakeSessionFactory, mock_config


def test_default_factory_is_required(registry: AdapterRegistry) -> None:
    with pytest.raises(ValueError, match="default session factory"):
        SessionManager(registry, None)  # type: ignore[arg-type]


def test_create_inserts_unique_sessions(manager: SessionManager) -> None:
    sessions = [manager.create(mock_config(f"run-{index}")) for index in range(50)]

    ids = [session.id for session in sessions]
    assert len(set(ids)) == len(ids)
    assert {session.id for session in manager.find_all()} == set(ids)
    for session in sessions:
        assert manager.find(session.id) is session
        assert session.state is SessionState.CREATED


def test_create_binds_config_and_executable(
    manager: SessionManager, default_factory: FakeSessionFactory
) -> None:
    config = mock_config(program="main.mock")
    session = manager.create(config)

    [built] = default_factory.sessions
    assert built is session
    assert session.configuration == config
    assert session.executable.argv == ["mock-adapter", "--stdio"]


def test_factory_fallback_and_override(default_factory: FakeSessionFactory) -> None:
    custom = FakeSessionFactory(label="custom")
    registry = AdapterRegistry([FakeContributor("plain"), FakeContributor("special", custom)])
    manager = SessionManager(registry, default_factory)

    plain = manager.create(DebugConfiguration(type="plain", name="Launch"))
    special = manager.create(DebugConfiguration(type="special", name="Launch"))

    assert plain in default_factory.sessions
    assert special in custom.sessions
    assert special not in default_factory.sessions


def test_unknown_type_creates_nothing(
    manager: SessionManager, default_factory: FakeSessionFactory
) -> None:
    with pytest.raises(UnknownAdapterType):
        manager.create(DebugConfiguration(type="nonexistent", name="x"))
    assert manager.find_all() == []
    assert default_factory.sessions == []


def test_executable_failure_leaves_no_entry(default_factory: FakeSessionFactory) -> None:
    error = LaunchFailed("adapter binary missing")
    registry = AdapterRegistry([FakeContributor(executable_error=error)])
    manager = SessionManager(registry, default_factory)

    with pytest.raises(LaunchFailed) as excinfo:
        manager.create(mock_config())

    assert excinfo.value is error
    assert manager.find_all() == []


def test_remove_is_idempotent(manager: SessionManager) -> None:
    session = manager.create(mock_config())
    other = manager.create(mock_config("other"))

    manager.remove(session.id)
    manager.remove(session.id)
    manager.remove("never-created")

    assert manager.find(session.id) is None
    assert manager.find_all() == [other]


def test_termination_notification_removes_session(manager: SessionManager) -> None:
    session = manager.create(mock_config())

    session.terminate()

    assert manager.find(session.id) is None
    assert manager.find_all() == []


def test_find_all_is_a_snapshot(manager: SessionManager) -> None:
    for index in range(3):
        manager.create(mock_config(f"run-{index}"))

    snapshot = manager.find_all()
    for session in snapshot:
        session.terminate()

    assert len(snapshot) == 3
    assert manager.find_all() == []


def test_lifecycle_listeners(manager: SessionManager) -> None:
    events: list[tuple[str, str]] = []
    unsubscribe = manager.add_listener(lambda event, session: events.append((event, session.id)))

    session = manager.create(mock_config())
    manager.remove(session.id)
    manager.remove(session.id)
    unsubscribe()
    manager.create(mock_config("ignored"))

    assert events == [("created", session.id), ("removed", session.id)]


def test_failing_listener_does_not_break_create(manager: SessionManager) -> None:
    def _boom(event: str, session: object) -> None:
        raise RuntimeError("listener failure")

    manager.add_listener(_boom)
    session = manager.create(mock_config())
    assert manager.find(session.id) is session


class _FinishedSessionFactory(FakeSessionFactory):
    def get(self, session_id, config, executable):  # type: ignore[override]
        session = super().get(session_id, config, executable)
        session.terminate()
        return session


def test_already_terminated_session_is_not_kept() -> None:
    events: list[str] = []
    manager = SessionManager(AdapterRegistry([FakeContributor()]), _FinishedSessionFactory())
    manager.add_listener(lambda event, _: events.append(event))

    session = manager.create(mock_config())

    assert session.state is SessionState.TERMINATED
    assert manager.find(session.id) is None
    assert events == ["created", "removed"]


def test_listener_stopping_a_new_session_removes_it(manager: SessionManager) -> None:
    manager.add_listener(lambda event, session: session.stop() if event == "created" else None)

    session = manager.create(mock_config())

    assert session.state is SessionState.TERMINATED
    assert manager.find_all() == []
