"""Configuration package for loopwork.

This package provides Pydantic configuration models and loading utilities.
All models and functions are re-exported at the package level.
"""

from loopwork.core.config.loader import (
    check_unexpanded_vars,
    expand_env_vars,
    expand_env_vars_recursive,
    load_config,
)
from loopwork.core.config.models import (
    Config,
    HeartbeatConfig,
    LoggingConfig,
    ProxyConfig,
    RunInterval,
    ScheduleConfig,
)

__all__ = [
    # Models
    "Config",
    "HeartbeatConfig",
    "LoggingConfig",
    "ProxyConfig",
    "RunInterval",
    "ScheduleConfig",
    # Loaders
    "check_unexpanded_vars",
    "expand_env_vars",
    "expand_env_vars_recursive",
    "load_config",
]
