"""structlog configuration for CLI runs."""

from __future__ import annotations

import logging
from typing import Any

import structlog

from apprunner_autoscaling.config.models import LogFormat


def configure_logging(
    log_format: LogFormat = LogFormat.CONSOLE, level: str = "info"
) -> None:
    processors: list[Any] = [
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if log_format == LogFormat.JSON:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(level.upper())
        ),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )
