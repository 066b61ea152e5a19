"""loopwork - drift-compensating job loops with proxy heartbeats."""

__version__ = "0.1.0"
