"""Wall-clock stopwatch used to measure scheduler cycles."""

import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Duration:
    """An elapsed duration with microsecond precision."""

    nanoseconds: int

    @property
    def microseconds(self) -> int:
        return self.nanoseconds // 1_000

    @property
    def milliseconds(self) -> float:
        return self.nanoseconds / 1_000_000

    @property
    def seconds(self) -> float:
        return self.nanoseconds / 1_000_000_000

    @classmethod
    def from_micros(cls, microseconds: int) -> "Duration":
        return cls(nanoseconds=microseconds * 1_000)


class Stopwatch:
    """Measures how long a callable takes to run.

    ``timer`` returns nanoseconds and defaults to ``time.perf_counter_ns``;
    tests pass a fake to simulate slow work.
    """

    def __init__(self, timer: Callable[[], int] = time.perf_counter_ns):
        self._timer = timer

    def time(self, func: Callable[[], Any]) -> tuple[Any, Duration]:
        """Run ``func`` and return its result together with the elapsed duration.

        Exceptions raised by ``func`` propagate unchanged.
        """
        start = self._timer()
        result = func()
        return result, Duration(nanoseconds=self._timer() - start)
