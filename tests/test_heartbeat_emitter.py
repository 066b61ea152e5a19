"""Tests for HeartbeatEmitter."""

import json

import pytest

from loopwork.core.config import HeartbeatConfig
from loopwork.errors import NotConnectedError, SendError
from loopwork.runtime.scheduling.heartbeat import HeartbeatEmitter, HeartbeatState
from loopwork.transport.connection import ProxyConnection


@pytest.fixture
def connection(fake_socket, no_sleep) -> ProxyConnection:
    return ProxyConnection("billing", fake_socket, "proxy.local", 5557, sleep=no_sleep.append)


@pytest.fixture
def emitter(connection) -> HeartbeatEmitter:
    return HeartbeatEmitter("billing", connection)


def sent_payloads(socket) -> list[dict]:
    return [json.loads(parts[2]) for parts in socket.sent]


class TestHeartbeatState:
    def test_defaults(self) -> None:
        state = HeartbeatState()

        assert state.count == 0
        assert state.reset_pending is True


class TestSendHeartbeat:
    """Test heartbeat publication."""

    def test_first_heartbeat(self, emitter, fake_socket) -> None:
        """Test the first heartbeat carries count 0 and reset true."""
        emitter.send_heartbeat()

        assert fake_socket.sent[0][:2] == ["magnet_activate", "heartbeat"]
        assert sent_payloads(fake_socket) == [
            {"message": "Service [billing] - Heartbeat", "count": 0, "reset": True}
        ]

    def test_reset_only_on_first_heartbeat(self, emitter, fake_socket) -> None:
        """Test reset is true exactly once and count increases every send."""
        for _ in range(4):
            emitter.send_heartbeat()

        payloads = sent_payloads(fake_socket)
        assert [p["reset"] for p in payloads] == [True, False, False, False]
        assert [p["count"] for p in payloads] == [0, 1, 2, 3]
        assert emitter.state == HeartbeatState(count=4, reset_pending=False)

    def test_returns_published_payload(self, emitter) -> None:
        payload = emitter.send_heartbeat()

        assert payload == {"message": "Service [billing] - Heartbeat", "count": 0, "reset": True}

    def test_connects_once_and_reuses_connection(self, emitter, fake_socket, no_sleep) -> None:
        """Test the connection is established lazily and then reused."""
        assert fake_socket.connect_calls == []

        emitter.send_heartbeat()
        emitter.send_heartbeat()
        emitter.send_heartbeat()

        assert fake_socket.connect_calls == ["tcp://proxy.local:5557"]
        assert no_sleep == [0.2]

    def test_failed_connect_propagates_and_keeps_state(self, socket_factory, no_sleep) -> None:
        """Test a heartbeat that cannot be sent leaves the state untouched."""
        socket = socket_factory(fail_connect=True)
        connection = ProxyConnection("billing", socket, "proxy.local", 5557, sleep=no_sleep.append)
        emitter = HeartbeatEmitter("billing", connection)

        with pytest.raises(NotConnectedError):
            emitter.send_heartbeat()

        assert emitter.state == HeartbeatState(count=0, reset_pending=True)

    def test_send_failure_keeps_reset_pending(self, socket_factory, no_sleep) -> None:
        socket = socket_factory(fail_send=True)
        connection = ProxyConnection("billing", socket, "proxy.local", 5557, sleep=no_sleep.append)
        emitter = HeartbeatEmitter("billing", connection)

        with pytest.raises(SendError):
            emitter.send_heartbeat()

        assert emitter.state.reset_pending is True
        assert emitter.state.count == 0

        socket.fail_send = False
        emitter.send_heartbeat()

        assert json.loads(socket.sent[0][2])["reset"] is True

    def test_from_config_uses_channel_and_topic(self, connection, fake_socket) -> None:
        config = HeartbeatConfig(enabled=True, channel="ops", topic="alive")

        HeartbeatEmitter.from_config("billing", connection, config).send_heartbeat()

        assert fake_socket.sent[0][:2] == ["ops", "alive"]
