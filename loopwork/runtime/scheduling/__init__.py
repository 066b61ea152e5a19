"""Scheduling subsystem for loopwork.

Provides the interval scheduler, heartbeat emission and the work unit interface.
"""

from loopwork.runtime.scheduling.heartbeat import HeartbeatEmitter, HeartbeatState
from loopwork.runtime.scheduling.scheduler import (
    HeartbeatEnabled,
    HeartbeatMode,
    IntervalScheduler,
    NoHeartbeat,
    ScheduleState,
    compute_sleep_micros,
)
from loopwork.runtime.scheduling.work import (
    CycleReport,
    FunctionWorkUnit,
    StepResult,
    WorkUnit,
    as_work_unit,
)

__all__ = [
    "CycleReport",
    "FunctionWorkUnit",
    "HeartbeatEmitter",
    "HeartbeatEnabled",
    "HeartbeatMode",
    "HeartbeatState",
    "IntervalScheduler",
    "NoHeartbeat",
    "ScheduleState",
    "StepResult",
    "WorkUnit",
    "as_work_unit",
    "compute_sleep_micros",
]
