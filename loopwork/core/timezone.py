"""Scheduler clock utilities."""

from collections.abc import Callable
from datetime import datetime
from zoneinfo import ZoneInfo

Clock = Callable[[], datetime]


def make_clock(timezone_str: str = "UTC") -> Clock:
    """Build a zero-argument clock bound to a timezone.

    Raises ZoneInfoNotFoundError immediately for an unknown identifier.
    """
    tz = ZoneInfo(timezone_str)

    def clock() -> datetime:
        return datetime.now(tz)

    return clock
