"""Exception types raised by loopwork."""


class LoopworkError(Exception):
    """Base class for all loopwork errors."""


class NotConnectedError(LoopworkError, RuntimeError):
    """Raised when a message is sent on a connection that is not connected."""


class InvalidChannelOrTopicError(LoopworkError, ValueError):
    """Raised when a channel or topic is not a non-empty string."""

    def __init__(self, message: str, field: str, observed_type: str):
        super().__init__(message)
        self.field = field
        self.observed_type = observed_type


class SendError(LoopworkError, RuntimeError):
    """Raised when the transport fails to send a message."""
