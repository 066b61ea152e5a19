"""Payload normalization for messages sent through the proxy."""

import json
from typing import Any


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-standard JSON constant: {name}")


def is_json(message: Any) -> bool:
    """Check whether a message is an already-encoded JSON string.

    Only strings can be JSON. A string counts as JSON when it decodes to a
    truthy value, so ``""``, ``"null"``, ``"0"``, ``"false"``, ``"[]"``,
    ``'""'`` and ``'"0"'`` do not. Decoded objects count even when empty.
    """
    if not isinstance(message, str):
        return False

    try:
        decoded = json.loads(message, parse_constant=_reject_constant)
    except ValueError:
        return False

    if isinstance(decoded, dict):
        return True
    # A decoded "0" string is falsy on the wire, like ""
    if decoded == "0":
        return False
    return bool(decoded)


def encode_payload(message: Any) -> str:
    """Return the wire payload for a message.

    Already-encoded JSON strings pass through byte-identical; everything else
    is JSON encoded (strings become JSON string literals).

    Raises:
        TypeError: If the message is not JSON serializable.
    """
    if is_json(message):
        return message
    return json.dumps(message, separators=(",", ":"))
