"""
Loguru setup for the registry service.

Every record carries the ``trace_id`` of the request that produced it.
Records from libraries using the standard ``logging`` module (uvicorn,
pynamodb, botocore) are forwarded to loguru so one sink sees everything.
"""

import inspect
import logging
import sys
from typing import Any

from loguru import logger

from oauth2_registry.config import settings
from oauth2_registry.core.trace_context import trace_id_context
from oauth2_registry.core.uvicorn_filters import HealthCheckFilter

NO_TRACE_ID = "N/A"

INTERCEPTED_LOGGERS = (
    "uvicorn",
    "uvicorn.access",
    "uvicorn.error",
    "fastapi",
    "pynamodb",
    "botocore",
)


def add_trace_id(record: dict[str, Any]) -> bool:
    """Stamp the current request's trace id on ``record`` (sink filter)."""
    record["extra"]["trace_id"] = trace_id_context.get() or NO_TRACE_ID
    return True


def configure_logger() -> None:
    """Replace loguru's default sink with one stderr sink built from settings."""
    logger.remove()
    logger.add(
        sink=sys.stderr,
        level=settings.log_level.upper(),
        format=settings.log_format,
        filter=add_trace_id,
        colorize=not settings.log_serialize,
        serialize=settings.log_serialize,
        backtrace=True,
        diagnose=settings.debug,
        enqueue=settings.logger_enqueue,
    )


configure_logger()


class InterceptHandler(logging.Handler):
    """Standard logging handler that re-emits records through loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Report the library call site, not this handler or the logging module.
        frame, depth = inspect.currentframe(), 0
        while frame is not None and (
            depth == 0 or frame.f_code.co_filename == logging.__file__
        ):
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


def intercept_standard_logging() -> None:
    """
    Route library loggers to loguru.

    Call once at startup, before the server starts accepting requests.
    Health probes are dropped from the uvicorn access log.
    """
    logging.basicConfig(handlers=[InterceptHandler()], level=logging.INFO)

    for name in INTERCEPTED_LOGGERS:
        library_logger = logging.getLogger(name)
        library_logger.handlers = [InterceptHandler()]
        library_logger.propagate = False

    access_logger = logging.getLogger("uvicorn.access")
    if not any(isinstance(f, HealthCheckFilter) for f in access_logger.filters):
        access_logger.addFilter(HealthCheckFilter())


__all__ = ["logger", "InterceptHandler", "intercept_standard_logging"]
