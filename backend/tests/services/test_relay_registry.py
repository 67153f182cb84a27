"""
Unit tests for the in-process ConnectionRegistry.
"""

import asyncio
import time
from typing import Any, List

import pytest

from farmdirect.core.config import settings
from farmdirect.services.messaging.relay import SCOPE_ALL, SCOPE_PARTICIPANTS, ConnectionRegistry

MESSAGE = {"id": "01HMSG", "body": "Fresh eggs today"}


class FakeConnection:
    def __init__(self, fail: bool = False, delay: float = 0.0) -> None:
        self.sent: List[Any] = []
        self.fail = fail
        self.delay = delay

    async def send_json(self, data: Any, mode: str = "text") -> None:
        if self.fail:
            raise RuntimeError("socket gone")
        if self.delay:
            await asyncio.sleep(self.delay)
        self.sent.append(data)


@pytest.fixture
def registry():
    return ConnectionRegistry()


class TestRegistryState:
    def test_register_is_anonymous_until_identified(self, registry):
        conn = FakeConnection()
        registry.register(conn)

        assert registry.connection_count == 1
        assert registry.identified_count == 0
        assert registry.user_of(conn) is None

        registry.identify(conn, "alice")

        assert registry.identified_count == 1
        assert registry.user_of(conn) == "alice"
        assert registry.connections_for("alice") == {conn}

    def test_multiple_connections_per_user(self, registry):
        first, second = FakeConnection(), FakeConnection()
        for conn in (first, second):
            registry.register(conn)
            registry.identify(conn, "alice")

        registry.unregister(first)

        assert registry.connections_for("alice") == {second}

    def test_rejoin_moves_connection(self, registry):
        conn = FakeConnection()
        registry.register(conn)
        registry.identify(conn, "alice")
        registry.identify(conn, "bob")

        assert registry.connections_for("alice") == set()
        assert registry.connections_for("bob") == {conn}

    def test_unregister_twice_is_safe(self, registry):
        conn = FakeConnection()
        registry.register(conn)
        registry.identify(conn, "alice")

        registry.unregister(conn)
        registry.unregister(conn)

        assert registry.connection_count == 0


class TestPublish:
    @pytest.mark.asyncio
    async def test_participants_scope_reaches_only_sender_and_recipient(self, registry):
        alice, bob, carol, anon = (FakeConnection() for _ in range(4))
        for conn, user in ((alice, "alice"), (bob, "bob"), (carol, "carol")):
            registry.register(conn)
            registry.identify(conn, user)
        registry.register(anon)

        delivered = await registry.publish_new_message(
            MESSAGE, sender_id="bob", recipient_id="alice", scope=SCOPE_PARTICIPANTS
        )

        assert delivered == 2
        expected = {
            "type": "new_message",
            "message": MESSAGE,
            "senderId": "bob",
            "recipientId": "alice",
        }
        assert alice.sent == [expected]
        assert bob.sent == [expected]
        assert carol.sent == []
        assert anon.sent == []

    @pytest.mark.asyncio
    async def test_all_scope_fans_out_to_identified_only(self, registry):
        alice, bob, carol, anon = (FakeConnection() for _ in range(4))
        for conn, user in ((alice, "alice"), (bob, "bob"), (carol, "carol")):
            registry.register(conn)
            registry.identify(conn, user)
        registry.register(anon)

        delivered = await registry.publish_new_message(
            MESSAGE, sender_id="bob", recipient_id="alice", scope=SCOPE_ALL
        )

        assert delivered == 3
        assert len(carol.sent) == 1
        assert anon.sent == []

    @pytest.mark.asyncio
    async def test_failed_socket_is_dropped_and_others_still_receive(self, registry):
        broken, healthy = FakeConnection(fail=True), FakeConnection()
        for conn in (broken, healthy):
            registry.register(conn)
            registry.identify(conn, "alice")

        delivered = await registry.publish_new_message(MESSAGE, "bob", "alice")

        assert delivered == 1
        assert len(healthy.sent) == 1
        assert registry.connections_for("alice") == {healthy}

    @pytest.mark.asyncio
    async def test_no_listeners(self, registry):
        assert await registry.publish_new_message(MESSAGE, "bob", "alice") == 0

    @pytest.mark.asyncio
    async def test_stalled_socket_times_out_without_delaying_others(self, registry, monkeypatch):
        monkeypatch.setattr(settings, "relay_send_timeout_seconds", 0.05)
        stalled, healthy = FakeConnection(delay=2.0), FakeConnection()
        for conn in (stalled, healthy):
            registry.register(conn)
            registry.identify(conn, "alice")

        started = time.monotonic()
        delivered = await registry.publish_new_message(MESSAGE, "bob", "alice")
        elapsed = time.monotonic() - started

        assert elapsed < 1.0
        assert delivered == 1
        assert len(healthy.sent) == 1
        assert stalled.sent == []
        assert registry.connections_for("alice") == {healthy}


class TestScheduledPublish:
    @pytest.mark.asyncio
    async def test_schedule_returns_before_delivery(self, registry):
        slow = FakeConnection(delay=0.05)
        registry.register(slow)
        registry.identify(slow, "alice")

        task = registry.schedule_new_message(MESSAGE, "bob", "alice")

        assert slow.sent == []
        assert registry.pending_count == 1

        assert await task == 1
        await asyncio.sleep(0)
        assert len(slow.sent) == 1
        assert registry.pending_count == 0

    @pytest.mark.asyncio
    async def test_scheduled_failure_is_contained(self, registry):
        broken = FakeConnection(fail=True)
        registry.register(broken)
        registry.identify(broken, "alice")

        assert await registry.schedule_new_message(MESSAGE, "bob", "alice") == 0
        assert registry.connections_for("alice") == set()
