"""Guarded publish connection to the delegation proxy."""

import json
import logging
import time
from collections.abc import Callable
from typing import Any

from loopwork.core.config import ProxyConfig
from loopwork.errors import InvalidChannelOrTopicError, NotConnectedError, SendError
from loopwork.transport.encoding import encode_payload
from loopwork.transport.sockets import PublishSocket, TransportError

logger = logging.getLogger(__name__)

DEFAULT_SETTLE_DELAY_SECONDS = 0.2


class ProxyConnection:
    """Owns one outbound publish socket and guards every send on it.

    Connection state is never cached: ``is_connected()`` asks the socket for
    its active connect endpoints each time, so a connection dropped by the
    transport is noticed on the next send.
    """

    def __init__(
        self,
        service_name: str,
        socket: PublishSocket,
        host: str,
        port: int,
        settle_delay: float = DEFAULT_SETTLE_DELAY_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """Initialize the connection.

        Args:
            service_name: Name of the service, used as prefix in every log line.
            socket: Publish socket owned by this connection from now on.
            host: Proxy host.
            port: Proxy port.
            settle_delay: Seconds to wait after connecting before sends are reliable.
            sleep: Sleep function (injectable for tests).
        """
        self.service_name = service_name
        self.dsn = f"tcp://{host}:{port}"
        self._socket = socket
        self._settle_delay = settle_delay
        self._sleep = sleep

    @classmethod
    def from_config(
        cls,
        service_name: str,
        socket: PublishSocket,
        config: ProxyConfig,
        sleep: Callable[[float], None] = time.sleep,
    ) -> "ProxyConnection":
        """Build a connection from proxy settings."""
        return cls(
            service_name=service_name,
            socket=socket,
            host=config.host,
            port=config.port,
            settle_delay=config.settle_delay_ms / 1000,
            sleep=sleep,
        )

    @property
    def socket(self) -> PublishSocket:
        return self._socket

    def connect(self) -> "ProxyConnection":
        """Connect the socket to the proxy unless it already is.

        Transport failures are logged, not raised; the next send will fail
        the connected check instead.
        """
        if self.is_connected():
            logger.info(f"Service [{self.service_name}] - Reconnecting socket")
            return self

        try:
            self._socket.connect(self.dsn)
        except TransportError as e:
            logger.error(
                f"Service [{self.service_name}] - failed to connect socket to dsn [{self.dsn}] - Exception: {e}"
            )
            return self

        logger.info(f"Service [{self.service_name}] - Connecting socket to dsn [{self.dsn}]")

        # The transport accepts connections asynchronously; messages sent
        # right after connect() can be silently dropped.
        self._sleep(self._settle_delay)

        return self

    def is_connected(self) -> bool:
        """Check whether the socket has at least one live connect endpoint."""
        endpoints = self._socket.endpoints()
        return bool(endpoints.get("connect"))

    def is_not_connected(self) -> bool:
        return not self.is_connected()

    def send(self, channel: Any, topic: Any, message: Any) -> "ProxyConnection":
        """Send a three-part message ``[channel, topic, payload]``.

        Args:
            channel: Non-empty channel name.
            topic: Non-empty topic name.
            message: JSON string (sent as-is) or any JSON-serializable value.

        Returns:
            self, to allow chaining.

        Raises:
            NotConnectedError: If the socket is not connected.
            InvalidChannelOrTopicError: If channel or topic is not a non-empty string.
            SendError: If the transport fails to send.
        """
        self._guard_against_not_connected()
        self._guard_against_invalid("channel", channel)
        self._guard_against_invalid("topic", topic)

        payload = encode_payload(message)
        self._send_multipart([channel, topic, payload])

        return self

    def close(self) -> None:
        """Close the owned socket."""
        self._socket.close()
        logger.debug(f"Service [{self.service_name}] - Socket closed")

    def __enter__(self) -> "ProxyConnection":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _send_multipart(self, parts: list[str]) -> None:
        try:
            self._socket.send_multipart(parts)
        except TransportError as e:
            message = (
                f"Service [{self.service_name}] - failed sending message [{json.dumps(parts)}] - Exception: {e}"
            )
            logger.error(message)
            raise SendError(message) from e

    def _guard_against_not_connected(self) -> None:
        if self.is_not_connected():
            message = f"Service [{self.service_name}] - Cannot send message, socket is not connected"
            logger.error(message)
            raise NotConnectedError(message)

    def _guard_against_invalid(self, field: str, value: Any) -> None:
        if isinstance(value, str) and value:
            return

        observed_type = type(value).__name__
        message = (
            f"Service [{self.service_name}] - Cannot send message, {field} is invalid, "
            f"expected non-empty string, [{observed_type}] given"
        )
        logger.error(message)
        raise InvalidChannelOrTopicError(message, field=field, observed_type=observed_type)
