"""
Logging setup and configuration utilities.

This module provides centralized logging configuration using loguru with
support for file rotation and structured context. Records emitted through
the standard library (paho-mqtt, asyncio) are routed into loguru.
"""

import inspect
import logging
import sys
from pathlib import Path
from typing import List

from loguru import logger

from ..config.models import LoggingConfig

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level> | {extra}"
)


class InterceptHandler(logging.Handler):
    """Forward standard library log records to loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno  # type: ignore[assignment]

        # Find the caller outside the logging module so loguru reports it
        frame, depth = inspect.currentframe(), 0
        while frame and (depth == 0 or frame.f_code.co_filename == logging.__file__):
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def setup_logging(config: LoggingConfig) -> List[int]:
    """
    Setup application logging with the given configuration.

    Args:
        config: Logging configuration

    Returns:
        Identifiers of the loguru sinks that were added
    """
    logger.remove()
    sink_ids = []

    if config.console_enabled:
        sink_ids.append(logger.add(
            sys.stderr,
            format=CONSOLE_FORMAT,
            level=config.level.upper(),
            colorize=True,
            backtrace=True,
            diagnose=False
        ))

    if config.file_enabled:
        log_dir = Path(config.log_directory)
        log_dir.mkdir(parents=True, exist_ok=True)

        sink_ids.append(logger.add(
            log_dir / "consumer.log",
            format=config.format,
            level=config.level.upper(),
            rotation=config.rotation,
            retention=config.retention,
            compression="zip",
            backtrace=True,
            diagnose=False
        ))

        sink_ids.append(logger.add(
            log_dir / "error.log",
            format=config.format,
            level="ERROR",
            rotation=config.rotation,
            retention=config.retention,
            compression="zip"
        ))

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)

    # Silence noisy loggers
    logging.getLogger("asyncio").setLevel(logging.WARNING)

    return sink_ids
