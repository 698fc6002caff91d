from __future__ import annotations

import asyncio

from debug_host.api.streams import ALL_SESSIONS, DebugBroker
from debug_host.core import AdapterRegistry, SessionManager
from tests.fakes import FakeContributor, FakeSessionFactory, mock_config


def _retire(broker: DebugBroker, session_id: str) -> None:
    broker.publish(session_id, "created", {})
    broker.publish(session_id, "removed", {})


def test_only_recent_retired_sessions_keep_history() -> None:
    broker = DebugBroker(retained_sessions=2)
    for index in range(5):
        _retire(broker, f"s{index}")
    broker.publish("live", "created", {})

    assert sorted(broker.channels()) == sorted([ALL_SESSIONS, "s3", "s4", "live"])
    assert broker.history("s0") == []
    assert [event.kind for event in broker.history("s4")] == ["created", "removed"]
    assert len(broker.history(ALL_SESSIONS)) == 11


def test_followed_channel_survives_until_unsubscribed() -> None:
    broker = DebugBroker(retained_sessions=0)

    async def _scenario() -> None:
        _, _, unsubscribe, _ = broker.subscribe_with_history("s0")
        _retire(broker, "s0")
        assert "s0" in broker.channels()
        unsubscribe()
        assert "s0" not in broker.channels()

    asyncio.run(_scenario())


def test_terminated_sessions_do_not_accumulate_channels() -> None:
    broker = DebugBroker(retained_sessions=8)
    factory = FakeSessionFactory()
    registry = AdapterRegistry([FakeContributor()])
    manager = SessionManager(registry, factory)
    manager.add_listener(broker.lifecycle_listener)

    for _ in range(200):
        manager.create(mock_config()).stop()

    assert manager.find_all() == []
    assert len(broker.channels()) == 9
