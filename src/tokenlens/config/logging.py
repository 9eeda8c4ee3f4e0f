"""Logging configuration using structlog.

Every event carries the service name and version. Per-request fields
(method, path) are bound as contextvars by RequestContextMiddleware and
merged into each event logged while the request is handled.
"""

import logging
import sys
from collections.abc import MutableMapping
from typing import Any

import structlog

from tokenlens.config.settings import Settings, get_settings

# httpx logs every upstream request at INFO
QUIET_LOGGERS = ("httpx", "httpcore")


def service_info_processor(settings: Settings) -> structlog.types.Processor:
    """Build a processor that stamps events with the service name and version."""

    def add_service_info(
        _logger: Any, _method_name: str, event_dict: MutableMapping[str, Any]
    ) -> MutableMapping[str, Any]:
        event_dict.setdefault("service", settings.app_name)
        event_dict.setdefault("version", settings.app_version)
        return event_dict

    return add_service_info


def configure_logging(settings: Settings | None = None) -> None:
    """Configure structlog and stdlib logging for the service."""
    settings = settings or get_settings()
    log_level = getattr(logging, settings.log_level)

    renderer: structlog.types.Processor = (
        structlog.dev.ConsoleRenderer()
        if settings.debug
        else structlog.processors.JSONRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            service_info_processor(settings),
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # uvicorn and the upstream HTTP client log through the stdlib
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=log_level,
    )
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(log_level, logging.WARNING))


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a configured logger instance."""
    logger: structlog.stdlib.BoundLogger = structlog.get_logger(name)
    return logger
