"""HeartbeatEmitter for announcing service liveness through the proxy."""

import logging
from dataclasses import dataclass

from loopwork.core.config import HeartbeatConfig
from loopwork.transport.connection import ProxyConnection

logger = logging.getLogger(__name__)

HEARTBEAT_CHANNEL = "magnet_activate"
HEARTBEAT_TOPIC = "heartbeat"
HEARTBEAT_INTERVAL_SECONDS = 5


@dataclass
class HeartbeatState:
    """Counter and one-shot reset flag carried by every heartbeat."""

    count: int = 0
    reset_pending: bool = True


class HeartbeatEmitter:
    """Publishes liveness heartbeats over a shared proxy connection.

    The first heartbeat after construction carries ``reset: true`` so the
    recipient restarts its count; every later one carries ``reset: false``.
    """

    def __init__(
        self,
        service_name: str,
        connection: ProxyConnection,
        channel: str = HEARTBEAT_CHANNEL,
        topic: str = HEARTBEAT_TOPIC,
    ):
        self.service_name = service_name
        self.connection = connection
        self.channel = channel
        self.topic = topic
        self.state = HeartbeatState()

    @classmethod
    def from_config(
        cls,
        service_name: str,
        connection: ProxyConnection,
        config: HeartbeatConfig,
    ) -> "HeartbeatEmitter":
        return cls(service_name, connection, channel=config.channel, topic=config.topic)

    def build_payload(self) -> dict[str, object]:
        return {
            "message": f"Service [{self.service_name}] - Heartbeat",
            "count": self.state.count,
            "reset": self.state.reset_pending,
        }

    def send_heartbeat(self) -> dict[str, object]:
        """Connect if needed and publish one heartbeat.

        Returns:
            The payload that was published.

        Raises:
            NotConnectedError: If the connection could not be established.
            SendError: If the transport failed to send.
        """
        payload = self.build_payload()

        self.connection.connect().send(self.channel, self.topic, payload)

        # Only the first heartbeat after startup asks the recipient to reset
        if self.state.reset_pending:
            self.state.reset_pending = False
        self.state.count += 1

        logger.debug(f"Service [{self.service_name}] - Heartbeat {payload['count']} sent")
        return payload
