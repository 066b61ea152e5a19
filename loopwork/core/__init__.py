"""Core functionality for loopwork."""

from loopwork.core.config import Config, load_config
from loopwork.core.stopwatch import Duration, Stopwatch
from loopwork.core.timezone import Clock, make_clock

__all__ = [
    "Clock",
    "Config",
    "Duration",
    "Stopwatch",
    "load_config",
    "make_clock",
]
