"""Pydantic configuration models for loopwork.

This module defines all configuration models used throughout loopwork.
For loading and merging logic, see loader.py.
"""

import os
from enum import Enum
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

DEFAULT_PROXY_HOST = "engage-delegation-proxy"
DEFAULT_PROXY_PORT = 5557
DEFAULT_PERSISTENT_ID = "delegation_proxy"

PROXY_HOST_ENV = "DELEGATION_PROXY_HOST"
PROXY_PORT_ENV = "DELEGATION_PROXY_PORT"
PERSISTENT_ID_ENV = "DELEGATION_PROXY_PERSISTENT_ID"


class RunInterval(str, Enum):
    """How often a job's process() is dispatched."""

    SECOND = "second"
    MINUTE = "minute"
    HOUR = "hour"
    DAY = "day"
    EVERY_TICK = "every_tick"

    @classmethod
    def _missing_(cls, value: object) -> "RunInterval | None":
        # Accept "everyTick" / "EVERY-TICK" spellings
        if isinstance(value, str):
            normalized = value.replace("-", "_").lower()
            if normalized == "everytick":
                return cls.EVERY_TICK
            for member in cls:
                if member.value == normalized:
                    return member
        return None


class ScheduleConfig(BaseModel):
    """Configuration for the interval scheduler. Immutable once built."""

    model_config = ConfigDict(frozen=True)

    interval: RunInterval = Field(default=RunInterval.SECOND, description="Run interval of the job")
    cycle_padding_micros: int = Field(
        default=100_000,
        ge=0,
        description="Target duration of one scheduler cycle in microseconds (100000 = 10 polls/second)",
    )

    @field_validator("interval", mode="before")
    @classmethod
    def _normalize_interval(cls, value: object) -> object:
        if isinstance(value, str):
            return RunInterval(value)
        return value

    @model_validator(mode="after")
    def _require_padding(self) -> "ScheduleConfig":
        if self.cycle_padding_micros == 0 and self.interval is not RunInterval.EVERY_TICK:
            raise ValueError(
                f"cycle_padding_micros must be greater than 0 for interval '{self.interval.value}'"
            )
        return self


class HeartbeatConfig(BaseModel):
    """Configuration for liveness heartbeats."""

    enabled: bool = Field(default=False, description="Publish a heartbeat every 5 seconds")
    channel: str = Field(default="magnet_activate", min_length=1, description="Heartbeat channel name")
    topic: str = Field(default="heartbeat", min_length=1, description="Heartbeat topic")


class ProxyConfig(BaseModel):
    """Connection settings for the delegation proxy."""

    host: str = Field(default=DEFAULT_PROXY_HOST, description="Proxy host name")
    port: int = Field(default=DEFAULT_PROXY_PORT, gt=0, lt=65536, description="Proxy port")
    persistent_id: str = Field(
        default=DEFAULT_PERSISTENT_ID,
        description="Identity of the local heartbeat-publishing socket",
    )
    settle_delay_ms: int = Field(default=200, ge=0, description="Pause after connecting before sends are reliable")

    @property
    def dsn(self) -> str:
        """Connection string of the proxy endpoint."""
        return f"tcp://{self.host}:{self.port}"

    @classmethod
    def from_env(cls, **overrides: object) -> "ProxyConfig":
        """Build proxy settings from DELEGATION_PROXY_* environment variables.

        Explicit keyword overrides take precedence over the environment.
        """
        values: dict[str, object] = {
            "host": os.environ.get(PROXY_HOST_ENV, DEFAULT_PROXY_HOST),
            "port": os.environ.get(PROXY_PORT_ENV, DEFAULT_PROXY_PORT),
            "persistent_id": os.environ.get(PERSISTENT_ID_ENV, DEFAULT_PERSISTENT_ID),
        }
        values.update(overrides)
        return cls(**values)


class LoggingConfig(BaseModel):
    """Configuration for logging system."""

    level: str = Field(default="INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)")
    directory: str = Field(default="logs", description="Directory for log files")
    max_size_mb: int = Field(default=10, description="Maximum log file size in MB before rotation")
    backup_count: int = Field(default=5, description="Number of backup log files to keep")
    to_file: bool = Field(default=True, description="Write rotating log files in addition to the console")
    per_job: bool = Field(default=True, description="Create a separate log file per job")


class Config(BaseModel):
    """Root configuration for loopwork."""

    service_name: str = Field(default="loopwork", min_length=1, description="Service name used in logs and heartbeats")
    timezone: str = Field(default="UTC", description="IANA timezone of the scheduler clock")
    schedule: ScheduleConfig = Field(default_factory=ScheduleConfig)
    heartbeat: HeartbeatConfig = Field(default_factory=HeartbeatConfig)
    proxy: ProxyConfig = Field(default_factory=ProxyConfig.from_env)
    logging: LoggingConfig = Field(default_factory=LoggingConfig, description="Logging configuration")

    model_config = {"extra": "allow"}

    @field_validator("timezone")
    @classmethod
    def _validate_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone: {value}") from e
        return value
