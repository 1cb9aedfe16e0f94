"""Tests for room routing and the redis relay between processes."""

import asyncio
import json
import logging
from unittest.mock import AsyncMock, patch

import pytest

from fintrack.core.security import room_id_for
from fintrack.push.relay import PushRelay, RedisPushPublisher
from fintrack.push.rooms import PushChannelRouter

from tests.factories import FakeWebSocket


def run(coro):
    return asyncio.run(coro)


class TestRoomIds:
    def test_room_id_is_sha256_of_user_id(self):
        room = room_id_for("user-1")
        assert len(room) == 64
        assert room == room_id_for("user-1")
        assert room != room_id_for("user-2")


class TestPushChannelRouter:
    def test_connect_accepts_socket(self):
        router = PushChannelRouter()
        socket = FakeWebSocket()
        run(router.connect(socket))
        assert socket.accepted

    def test_publish_reaches_all_members_only(self):
        router = PushChannelRouter()
        a, b, outsider = FakeWebSocket(), FakeWebSocket(), FakeWebSocket()
        router.join(a, "room-1")
        router.join(b, "room-1")
        router.join(outsider, "room-2")

        delivered = run(router.publish("room-1", "newNotification", {"id": "n1"}))

        assert delivered == 2
        assert a.sent == [{"event": "newNotification", "data": {"id": "n1"}}]
        assert b.sent == a.sent
        assert outsider.sent == []

    def test_register_joins_hashed_room_of_user(self):
        router = PushChannelRouter()
        socket = FakeWebSocket()

        assert router.register(socket, "user-1") == room_id_for("user-1")
        assert router.members(room_id_for("user-1")) == 1
        assert router.members("user-1") == 0

    def test_publish_to_empty_room_is_a_no_op(self):
        router = PushChannelRouter()
        assert run(router.publish("nobody-here", "newNotification", {})) == 0

    def test_socket_in_several_rooms_receives_from_each(self):
        router = PushChannelRouter()
        socket = FakeWebSocket()
        router.join(socket, "room-1")
        router.join(socket, "room-2")

        run(router.publish("room-1", "ping", 1))
        run(router.publish("room-2", "ping", 2))

        assert [m["data"] for m in socket.sent] == [1, 2]

    def test_disconnect_removes_all_memberships(self):
        router = PushChannelRouter()
        socket = FakeWebSocket()
        router.join(socket, "room-1")
        router.register(socket, "user-1")

        router.disconnect(socket)

        assert router.members("room-1") == 0
        assert router.members(room_id_for("user-1")) == 0
        assert run(router.publish("room-1", "ping", None)) == 0

    def test_broken_socket_is_dropped(self):
        router = PushChannelRouter()
        healthy, broken = FakeWebSocket(), FakeWebSocket(broken=True)
        router.join(healthy, "room-1")
        router.join(broken, "room-1")

        assert run(router.publish("room-1", "ping", None)) == 1
        assert router.members("room-1") == 1


class TestRelay:
    def test_publisher_writes_room_event_and_data(self, redis_client):
        pubsub = redis_client.pubsub()
        pubsub.subscribe("test-channel")
        pubsub.get_message(timeout=1)  # subscribe confirmation

        RedisPushPublisher(redis_client, channel="test-channel").publish("room-1", "newNotification", {"id": "n1"})

        message = pubsub.get_message(timeout=1)
        assert json.loads(message["data"]) == {"room": "room-1", "event": "newNotification", "data": {"id": "n1"}}

    def test_dispatch_forwards_to_router(self):
        router = PushChannelRouter()
        socket = FakeWebSocket()
        router.join(socket, "room-1")
        relay = PushRelay(router, redis_client=None, channel="test-channel")

        raw = json.dumps({"room": "room-1", "event": "newNotification", "data": {"id": "n1"}})
        assert run(relay.dispatch(raw)) == 1
        assert socket.sent == [{"event": "newNotification", "data": {"id": "n1"}}]

    def test_dispatch_ignores_malformed_messages(self):
        router = PushChannelRouter()
        relay = PushRelay(router, redis_client=None, channel="test-channel")

        assert run(relay.dispatch("not json")) == 0
        assert run(relay.dispatch(json.dumps({"event": "x"}))) == 0

    def test_unexpected_error_restarts_subscription(self, caplog):
        relay = PushRelay(PushChannelRouter(), redis_client=None, channel="test-channel")
        # the second failure stands in for shutdown so the loop ends
        listen = AsyncMock(side_effect=[RuntimeError("boom"), asyncio.CancelledError()])

        with patch.object(relay, "_listen", listen), \
                patch("fintrack.push.relay.asyncio.sleep", AsyncMock()), \
                caplog.at_level(logging.ERROR, logger="fintrack.push.relay"):
            with pytest.raises(asyncio.CancelledError):
                run(relay._run())

        assert listen.await_count == 2
        assert "Push relay failed, restarting" in caplog.text
