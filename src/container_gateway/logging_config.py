"""Structured logging configuration.

Renders JSON for log shippers or colored console output for development.
Values come from ``Settings`` at application startup.
"""

import logging
import sys
from typing import Literal

import structlog
from structlog.types import Processor


def setup_logging(
    service_name: str,
    log_format: Literal["json", "console"],
    log_level: str,
) -> None:
    """Configure structlog on top of stdlib logging and bind ``service``."""
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper(), logging.INFO),
        force=True,
    )

    processors: list[Processor] = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=False),
        # correlation_id, method, path from the request middleware
        structlog.contextvars.merge_contextvars,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if log_format == "json":
        processors.append(structlog.processors.JSONRenderer(sort_keys=False))
    else:
        processors.append(
            structlog.dev.ConsoleRenderer(exception_formatter=structlog.dev.plain_traceback)
        )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    structlog.contextvars.bind_contextvars(service=service_name)
    structlog.get_logger().info("logging_initialized", log_format=log_format, log_level=log_level)


def set_correlation_id(correlation_id: str) -> None:
    """Set correlation ID for current request context."""
    structlog.contextvars.bind_contextvars(correlation_id=correlation_id)
