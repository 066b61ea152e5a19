"""Runtime components for loopwork."""
