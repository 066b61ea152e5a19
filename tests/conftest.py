"""Shared fixtures for loopwork tests."""

from collections.abc import Sequence

import pytest

from loopwork.transport.sockets import TransportError


class FakePublishSocket:
    """In-memory PublishSocket recording every call."""

    def __init__(self, fail_connect: bool = False, fail_send: bool = False):
        self.fail_connect = fail_connect
        self.fail_send = fail_send
        self.connect_calls: list[str] = []
        self.sent: list[list[str]] = []
        self.connected: list[str] = []
        self.closed = False

    def connect(self, dsn: str) -> None:
        self.connect_calls.append(dsn)
        if self.fail_connect:
            raise TransportError(f"connect to [{dsn}] failed: host unreachable")
        self.connected.append(dsn)

    def send_multipart(self, parts: Sequence[str]) -> None:
        if self.fail_send:
            raise TransportError("send failed: socket closed")
        self.sent.append(list(parts))

    def endpoints(self) -> dict[str, list[str]]:
        return {"bind": [], "connect": list(self.connected)}

    def close(self) -> None:
        self.closed = True
        self.connected.clear()

    def drop_connection(self) -> None:
        """Simulate the transport silently losing the connection."""
        self.connected.clear()


@pytest.fixture
def fake_socket() -> FakePublishSocket:
    return FakePublishSocket()


@pytest.fixture
def no_sleep() -> list[float]:
    """Collects requested sleep durations instead of sleeping."""
    return []


@pytest.fixture
def socket_factory() -> type[FakePublishSocket]:
    return FakePublishSocket
