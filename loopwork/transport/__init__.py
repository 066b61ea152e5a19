"""Publish transport for loopwork.

Provides the guarded proxy connection and the socket it publishes on.
"""

from loopwork.transport.connection import ProxyConnection
from loopwork.transport.encoding import encode_payload, is_json
from loopwork.transport.sockets import (
    PublishSocket,
    TransportError,
    ZmqPublishSocket,
    create_publish_socket,
)

__all__ = [
    "ProxyConnection",
    "PublishSocket",
    "TransportError",
    "ZmqPublishSocket",
    "create_publish_socket",
    "encode_payload",
    "is_json",
]
