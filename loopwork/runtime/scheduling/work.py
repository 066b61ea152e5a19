"""Work unit interface and per-step results of a scheduler cycle."""

import logging
import traceback
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from loopwork.core.logging import get_job_logger


class WorkUnit(ABC):
    """A job the scheduler runs at its configured interval.

    Subclasses implement ``process()``; ``name`` identifies the job in logs
    and heartbeats and defaults to the class name.
    """

    name: str = ""

    def __init__(self, name: str | None = None):
        if name:
            self.name = name
        elif not self.name:
            self.name = type(self).__name__

    @property
    def logger(self) -> logging.Logger:
        """Logger dedicated to this job (see setup_job_logger)."""
        return get_job_logger(self.name)

    @abstractmethod
    def process(self) -> Any:
        """Do one unit of work."""


class FunctionWorkUnit(WorkUnit):
    """Adapts a plain callable to the WorkUnit interface."""

    def __init__(self, func: Callable[[], Any], name: str | None = None):
        super().__init__(name or getattr(func, "__name__", type(func).__name__))
        self._func = func

    def process(self) -> Any:
        return self._func()


def as_work_unit(target: Any, name: str | None = None) -> WorkUnit:
    """Turn a WorkUnit subclass, instance or plain callable into a WorkUnit.

    Raises:
        TypeError: If the target cannot be run as a job.
    """
    if isinstance(target, WorkUnit):
        return target
    if isinstance(target, type) and issubclass(target, WorkUnit):
        return target(name) if name else target()
    if callable(target):
        return FunctionWorkUnit(target, name=name)
    raise TypeError(f"Cannot run {type(target).__name__} as a job: expected a WorkUnit or a callable")


@dataclass
class StepResult:
    """Outcome of one step of a cycle (heartbeat or process)."""

    step: str
    ok: bool = True
    value: Any = None
    error: BaseException | None = None
    trace: str = ""

    @classmethod
    def attempt(cls, step: str, func: Callable[[], Any]) -> "StepResult":
        """Run ``func`` and capture its return value or the exception it raised."""
        try:
            return cls(step=step, value=func())
        except Exception as e:
            return cls(
                step=step,
                ok=False,
                error=e,
                trace="".join(traceback.format_exception(type(e), e, e.__traceback__)),
            )


@dataclass
class CycleReport:
    """What happened during one scheduler cycle."""

    skipped: bool = False
    heartbeat: StepResult | None = None
    process: StepResult | None = None
    elapsed_micros: int = 0
    sleep_micros: int = 0
    errors: list[StepResult] = field(default_factory=list)

    @property
    def processed(self) -> bool:
        return self.process is not None

    @property
    def heartbeat_sent(self) -> bool:
        return self.heartbeat is not None and self.heartbeat.ok

    def record(self, result: StepResult) -> StepResult:
        if result.step == "heartbeat":
            self.heartbeat = result
        else:
            self.process = result
        if not result.ok:
            self.errors.append(result)
        return result
