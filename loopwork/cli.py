"""CLI interface for loopwork."""

import argparse
import importlib
import logging
import sys
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from loopwork.core.config import Config, HeartbeatConfig, ScheduleConfig, load_config
from loopwork.core.logging import setup_job_logger, setup_logging
from loopwork.core.timezone import make_clock
from loopwork.runtime.scheduling import (
    HeartbeatEmitter,
    HeartbeatEnabled,
    HeartbeatMode,
    IntervalScheduler,
    NoHeartbeat,
    WorkUnit,
    as_work_unit,
)
from loopwork.transport import ProxyConnection, create_publish_socket

logger = logging.getLogger(__name__)


def resolve_job(target: str, name: str | None = None) -> WorkUnit:
    """Import a job from a ``module:attribute`` reference.

    Args:
        target: Reference such as ``myjobs.cleanup:CleanupJob``.
        name: Optional job name overriding the default.

    Returns:
        The job as a WorkUnit.

    Raises:
        ValueError: If the reference is malformed or the attribute is missing.
        ImportError: If the module cannot be imported.
    """
    module_name, _, attr = target.partition(":")
    if not module_name or not attr:
        raise ValueError(f"Invalid job reference '{target}'. Expected 'module:attribute'")

    module = importlib.import_module(module_name)
    try:
        obj: Any = getattr(module, attr)
    except AttributeError as e:
        raise ValueError(f"Module '{module_name}' has no attribute '{attr}'") from e

    return as_work_unit(obj, name=name)


def apply_overrides(config: Config, args: argparse.Namespace) -> Config:
    """Return a copy of ``config`` with command-line overrides applied."""
    updates: dict[str, Any] = {}

    if args.interval or args.padding is not None:
        updates["schedule"] = ScheduleConfig(
            interval=args.interval or config.schedule.interval,
            cycle_padding_micros=(
                args.padding if args.padding is not None else config.schedule.cycle_padding_micros
            ),
        )
    if args.heartbeat:
        updates["heartbeat"] = HeartbeatConfig(**{**config.heartbeat.model_dump(), "enabled": True})
    if args.service_name:
        updates["service_name"] = args.service_name

    return config.model_copy(update=updates)


def build_scheduler(config: Config, job: WorkUnit) -> tuple[IntervalScheduler, ProxyConnection | None]:
    """Wire socket, connection, heartbeat emitter and scheduler for a job.

    Returns:
        The scheduler and the connection it publishes on (None when
        heartbeats are disabled).
    """
    connection: ProxyConnection | None = None
    heartbeat: HeartbeatMode = NoHeartbeat()

    if config.heartbeat.enabled:
        socket = create_publish_socket(config.proxy.persistent_id)
        connection = ProxyConnection.from_config(config.service_name, socket, config.proxy)
        emitter = HeartbeatEmitter.from_config(config.service_name, connection, config.heartbeat)
        heartbeat = HeartbeatEnabled(emitter)

    scheduler = IntervalScheduler(
        job,
        config=config.schedule,
        heartbeat=heartbeat,
        clock=make_clock(config.timezone),
    )
    return scheduler, connection


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="loopwork - interval job runner with proxy heartbeats")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    run_parser = subparsers.add_parser("run", help="Run a job in a loop")
    run_parser.add_argument(
        "job",
        type=str,
        help="Job to run as 'module:attribute' (WorkUnit subclass, instance or callable)",
    )
    run_parser.add_argument(
        "-c",
        "--config",
        type=Path,
        help="Path to configuration file (defaults and environment when omitted)",
    )
    run_parser.add_argument(
        "--env-file",
        type=Path,
        default=Path(".env"),
        help="Environment file to load before reading configuration (default: .env)",
    )
    run_parser.add_argument(
        "--interval",
        type=str,
        choices=["second", "minute", "hour", "day", "every_tick", "everyTick"],
        help="Override the run interval",
    )
    run_parser.add_argument(
        "--padding",
        type=int,
        metavar="MICROS",
        help="Override the cycle padding in microseconds",
    )
    run_parser.add_argument("--service-name", type=str, help="Override the service name")
    run_parser.add_argument("--heartbeat", action="store_true", help="Enable proxy heartbeats")
    run_parser.add_argument("--once", action="store_true", help="Run a single cycle and exit")
    run_parser.add_argument(
        "--log-process-time",
        action="store_true",
        help="Log the processing time of every cycle",
    )
    run_parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose logging")

    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command != "run":
        parser.print_help()
        return 1

    if args.env_file and args.env_file.exists():
        load_dotenv(args.env_file)

    try:
        config = apply_overrides(load_config(args.config), args)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except yaml.YAMLError as e:
        print(f"Invalid YAML in configuration: {e}", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    setup_logging(
        level="DEBUG" if args.verbose else config.logging.level,
        directory=config.logging.directory,
        max_size_mb=config.logging.max_size_mb,
        backup_count=config.logging.backup_count,
        to_file=config.logging.to_file,
    )

    try:
        job = resolve_job(args.job)
    except (ImportError, ValueError, TypeError) as e:
        logger.error(f"Failed to load job '{args.job}': {e}")
        return 1

    if config.logging.to_file and config.logging.per_job:
        setup_job_logger(
            job.name,
            directory=config.logging.directory,
            max_size_mb=config.logging.max_size_mb,
            backup_count=config.logging.backup_count,
        )

    scheduler, connection = build_scheduler(config, job)

    try:
        scheduler.run(run_once=args.once, log_process_time=args.log_process_time)
    except KeyboardInterrupt:
        logger.info(f"Job [{job.name}] interrupted, stopping...")
    finally:
        if connection:
            connection.close()

    return 0


def run() -> None:
    """Entry point for the console script."""
    sys.exit(main())


if __name__ == "__main__":
    run()
