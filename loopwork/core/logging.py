"""Logging configuration and setup for loopwork."""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(
    level: str = "INFO",
    directory: str | Path = "logs",
    max_size_mb: int = 10,
    backup_count: int = 5,
    to_file: bool = True,
) -> None:
    """Configure root logger with console and (optionally) file handlers.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        directory: Directory for log files.
        max_size_mb: Maximum size in MB before rotation.
        backup_count: Number of backup files to keep.
        to_file: Whether to write the rotating ``loopwork.log`` file.
    """
    log_level = getattr(logging, level.upper())

    # Clear any existing handlers
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(log_level)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    root_logger.addHandler(console_handler)

    if to_file:
        log_dir = Path(directory)
        log_dir.mkdir(parents=True, exist_ok=True)

        file_handler = RotatingFileHandler(
            log_dir / "loopwork.log",
            maxBytes=max_size_mb * 1024 * 1024,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(log_level)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        root_logger.addHandler(file_handler)

    logging.info(f"Logging initialized: level={level}, file={'on' if to_file else 'off'}")


def setup_job_logger(
    job_name: str,
    directory: str | Path = "logs",
    max_size_mb: int = 10,
    backup_count: int = 5,
) -> logging.Logger:
    """Create a job-specific logger with its own log file.

    The logger still propagates to the root logger, so console output is
    shared with the rest of the process.

    Args:
        job_name: Name of the job (used in the logger name and file name).
        directory: Directory for log files.
        max_size_mb: Maximum size in MB before rotation.
        backup_count: Number of backup files to keep.

    Returns:
        Configured logger instance for the job.
    """
    job_logger = get_job_logger(job_name)

    # Prevent duplicate handlers if logger already exists
    if job_logger.handlers:
        return job_logger

    log_dir = Path(directory)
    log_dir.mkdir(parents=True, exist_ok=True)

    file_handler = RotatingFileHandler(
        log_dir / f"{job_name}.log",
        maxBytes=max_size_mb * 1024 * 1024,
        backupCount=backup_count,
        encoding="utf-8",
    )
    file_handler.setLevel(logging.NOTSET)
    file_handler.setFormatter(
        logging.Formatter(
            f"%(asctime)s - [{job_name}] %(name)s - %(levelname)s - %(message)s",
            datefmt=DATE_FORMAT,
        )
    )
    job_logger.addHandler(file_handler)

    return job_logger


def get_job_logger(job_name: str) -> logging.Logger:
    """Get the logger for a specific job."""
    return logging.getLogger(f"loopwork.job.{job_name}")
