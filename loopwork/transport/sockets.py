"""Publish socket abstraction and its ZeroMQ implementation.

ProxyConnection only talks to the ``PublishSocket`` protocol. The ZeroMQ
adapter translates ``zmq.ZMQError`` into ``TransportError`` so callers never
depend on the transport library directly.
"""

import logging
from collections.abc import Sequence
from typing import Protocol, runtime_checkable

import zmq

from loopwork.errors import LoopworkError

logger = logging.getLogger(__name__)


class TransportError(LoopworkError):
    """Raised by a publish socket when the transport rejects an operation."""


@runtime_checkable
class PublishSocket(Protocol):
    """Minimal surface of an outbound pub/sub socket."""

    def connect(self, dsn: str) -> None: ...

    def send_multipart(self, parts: Sequence[str]) -> None: ...

    def endpoints(self) -> dict[str, list[str]]: ...

    def close(self) -> None: ...


class ZmqPublishSocket:
    """A ``zmq.PUB`` socket that reports its active endpoints.

    libzmq has no query for the endpoints of a socket, so the adapter keeps
    the list of endpoints it successfully connected to and drops them
    again on close. Nothing binds, so the "bind" group stays empty.
    """

    def __init__(self, socket: zmq.Socket, identity: str | None = None):
        self._socket = socket
        self.identity = identity
        self._endpoints: dict[str, list[str]] = {"bind": [], "connect": []}

        if identity:
            try:
                self._socket.setsockopt(zmq.IDENTITY, identity.encode("utf-8"))
            except zmq.ZMQError as e:
                logger.warning(f"Socket identity [{identity}] not applied: {e}")

    @property
    def closed(self) -> bool:
        return bool(self._socket.closed)

    def connect(self, dsn: str) -> None:
        try:
            self._socket.connect(dsn)
        except zmq.ZMQError as e:
            raise TransportError(f"connect to [{dsn}] failed: {e}") from e
        self._endpoints["connect"].append(dsn)

    def send_multipart(self, parts: Sequence[str]) -> None:
        frames = [part.encode("utf-8") for part in parts]
        try:
            self._socket.send_multipart(frames)
        except zmq.ZMQError as e:
            raise TransportError(f"send failed: {e}") from e

    def endpoints(self) -> dict[str, list[str]]:
        if self.closed:
            return {"bind": [], "connect": []}
        return {group: list(items) for group, items in self._endpoints.items()}

    def close(self) -> None:
        self._socket.close(linger=0)
        self._endpoints = {"bind": [], "connect": []}


def create_publish_socket(
    persistent_id: str | None = None,
    context: zmq.Context | None = None,
) -> ZmqPublishSocket:
    """Create a PUB socket on the process-wide ZeroMQ context.

    Args:
        persistent_id: Identity string applied to the socket.
        context: ZeroMQ context to use (defaults to ``zmq.Context.instance()``).

    Returns:
        A fresh, unconnected ZmqPublishSocket.
    """
    ctx = context or zmq.Context.instance()
    return ZmqPublishSocket(ctx.socket(zmq.PUB), identity=persistent_id)
