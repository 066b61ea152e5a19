"""IntervalScheduler: a drift-compensating polling loop for a single job."""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from loopwork.core.config import RunInterval, ScheduleConfig
from loopwork.core.stopwatch import Stopwatch
from loopwork.core.timezone import Clock, make_clock
from loopwork.runtime.scheduling.heartbeat import HEARTBEAT_INTERVAL_SECONDS, HeartbeatEmitter
from loopwork.runtime.scheduling.work import CycleReport, StepResult, WorkUnit

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NoHeartbeat:
    """The scheduler publishes no heartbeats."""


@dataclass(frozen=True)
class HeartbeatEnabled:
    """The scheduler publishes heartbeats through ``emitter``."""

    emitter: HeartbeatEmitter


HeartbeatMode = NoHeartbeat | HeartbeatEnabled


@dataclass
class ScheduleState:
    """Timestamp of the last eligible cycle."""

    previous_timestamp: datetime | None = None


def compute_sleep_micros(padding_micros: int, elapsed_micros: int) -> int:
    """Microseconds left of the cycle padding after ``elapsed_micros`` of work."""
    return max(0, padding_micros - elapsed_micros)


def same_second(a: datetime, b: datetime) -> bool:
    """True if both timestamps fall in the same whole-second bucket."""
    return a.replace(microsecond=0) == b.replace(microsecond=0)


def is_due(interval: RunInterval, now: datetime) -> bool:
    """Check whether a job with ``interval`` should run in the second ``now``.

    Hourly and daily jobs run at the first second of their period, so each
    fires once per hour or day.
    """
    if interval in (RunInterval.SECOND, RunInterval.EVERY_TICK):
        return True
    if interval is RunInterval.MINUTE:
        return now.second == 0
    # Hour and day also pin second 0. Matching on minute == 0 alone would
    # dispatch on every poll of that minute, not once per period.
    if interval is RunInterval.HOUR:
        return now.minute == 0 and now.second == 0
    if interval is RunInterval.DAY:
        return now.hour == 0 and now.minute == 0 and now.second == 0
    return False


def is_heartbeat_second(now: datetime) -> bool:
    return now.second % HEARTBEAT_INTERVAL_SECONDS == 0


class IntervalScheduler:
    """Runs a work unit forever (or once) at a configured cadence.

    The loop polls the clock every ``cycle_padding_micros``. Each cycle is
    timed and the scheduler sleeps only for what is left of the padding, so
    slow work never pushes later runs back. Failures of the heartbeat or of
    ``process()`` are recorded in the cycle report, logged, and the loop
    carries on.
    """

    def __init__(
        self,
        work_unit: WorkUnit,
        config: ScheduleConfig | None = None,
        heartbeat: HeartbeatMode | None = None,
        clock: Clock | None = None,
        sleep: Callable[[float], None] = time.sleep,
        stopwatch: Stopwatch | None = None,
    ):
        """Initialize the scheduler.

        Args:
            work_unit: The job to run.
            config: Interval and cycle padding (defaults: every second, 100 ms).
            heartbeat: NoHeartbeat() or HeartbeatEnabled(emitter).
            clock: Zero-argument callable returning the current datetime.
            sleep: Sleep function taking seconds (injectable for tests).
            stopwatch: Stopwatch used to time each cycle.
        """
        self.work_unit = work_unit
        self.config = config or ScheduleConfig()
        self.heartbeat = heartbeat or NoHeartbeat()
        self.state = ScheduleState()
        self._clock = clock or make_clock()
        self._sleep = sleep
        self._stopwatch = stopwatch or Stopwatch()

    @property
    def job_name(self) -> str:
        return self.work_unit.name

    @property
    def heartbeats_enabled(self) -> bool:
        return isinstance(self.heartbeat, HeartbeatEnabled)

    def run(self, run_once: bool = False, log_process_time: bool = False) -> CycleReport | None:
        """Run the loop.

        Args:
            run_once: Run exactly one cycle and return its report.
            log_process_time: Log the processing time of every cycle.

        Returns:
            The report of the single cycle when ``run_once`` is set; the
            continuous loop never returns.
        """
        logger.info(
            f"Job [{self.job_name}] started (interval: {self.config.interval.value}, "
            f"padding: {self.config.cycle_padding_micros}us, "
            f"heartbeats: {'on' if self.heartbeats_enabled else 'off'})"
        )

        while True:
            report = self.run_cycle(log_process_time=log_process_time)
            if run_once:
                return report

    def run_cycle(self, log_process_time: bool = False) -> CycleReport:
        """Run one timed cycle and sleep the remainder of the padding."""
        report, elapsed = self._stopwatch.time(self.check_and_run_internal_schedule)

        for failure in report.errors:
            self._log_failure(failure)

        report.elapsed_micros = elapsed.microseconds
        report.sleep_micros = compute_sleep_micros(self.config.cycle_padding_micros, elapsed.microseconds)

        if log_process_time:
            logger.info(f"Job [{self.job_name}] cycle processed in {elapsed.milliseconds:.3f} ms")

        if report.sleep_micros > 0:
            self._sleep(report.sleep_micros / 1_000_000)

        return report

    def check_and_run_internal_schedule(self) -> CycleReport:
        """Check the clock and dispatch heartbeat and work if eligible."""
        now = self._clock()
        report = CycleReport()

        if self.config.interval is RunInterval.EVERY_TICK:
            report.record(StepResult.attempt("process", self.work_unit.process))
            self.state.previous_timestamp = now
            return report

        # The loop polls many times per second; act once per second only
        previous = self.state.previous_timestamp
        if previous is not None and same_second(now, previous):
            report.skipped = True
            return report

        if isinstance(self.heartbeat, HeartbeatEnabled) and is_heartbeat_second(now):
            report.record(StepResult.attempt("heartbeat", self.heartbeat.emitter.send_heartbeat))

        if is_due(self.config.interval, now):
            report.record(StepResult.attempt("process", self.work_unit.process))

        self.state.previous_timestamp = now
        return report

    def _log_failure(self, failure: StepResult) -> None:
        logger.error(
            f"Error running job [{self.job_name}] during {failure.step} "
            f"ExceptionMessage: {failure.error} Trace: {failure.trace}"
        )
