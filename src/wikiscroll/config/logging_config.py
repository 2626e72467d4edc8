# ┌───────────────────────────────────────────────────────────────┐
# │  Project: WikiScroll Edge                                     │
# │  Edge service for the WikiScroll article feed                 │
# └───────────────────────────────────────────────────────────────┘

"""
Structured logging for the WikiScroll edge service.

structlog renders through stdlib logging so uvicorn and httpx records share
the same handlers. Loggers are named ``service.<Component>`` for fetchers and
the cache, ``api.<module>`` for the HTTP layer.
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Dict, Optional

import structlog
from structlog.stdlib import LoggerFactory

from ..core.exceptions import ConfigurationException
from .settings import Settings, get_settings

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# Size-based stand-ins for the configured rotation policy.
ROTATION_MAX_BYTES: Dict[str, int] = {
    "daily": 10 * 1024 * 1024,
    "weekly": 50 * 1024 * 1024,
    "monthly": 100 * 1024 * 1024,
}

# Per-request chatter from the upstream client and the server.
QUIET_LOGGERS = ("httpx", "httpcore", "asyncio", "uvicorn.access")


def _renderer(log_format: str):
    if log_format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer()


def setup_logging(
    log_level: Optional[str] = None,
    log_format: Optional[str] = None,
    settings: Optional[Settings] = None,
) -> None:
    """
    Configure structlog and the root logger.

    Args:
        log_level: overrides ``settings.log_level``
        log_format: ``json`` or ``text``, overrides ``settings.log_format``
        settings: defaults to the global settings

    Raises:
        ConfigurationException: unknown log level or format
    """
    settings = settings or get_settings()
    log_level = (log_level or settings.log_level).upper()
    log_format = log_format or settings.log_format
    if log_level not in LOG_LEVELS:
        raise ConfigurationException(f"Unknown log level: {log_level}", context=log_level)
    if log_format not in ("json", "text"):
        raise ConfigurationException(f"Unknown log format: {log_format}", context=log_format)
    level = getattr(logging, log_level)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            _renderer(log_format),
        ],
        context_class=dict,
        logger_factory=LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()
    root.addHandler(logging.StreamHandler(sys.stdout))
    if settings.log_file:
        root.addHandler(file_handler(settings))

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    if settings.is_development:
        logging.getLogger("service").setLevel(logging.DEBUG)

    get_service_logger("logging").info(
        "Logging configured",
        level=log_level,
        format=log_format,
        log_file=settings.log_file,
        environment=settings.environment,
    )


def file_handler(settings: Settings) -> logging.handlers.RotatingFileHandler:
    """Rotating handler for ``settings.log_file``; unknown policies rotate daily."""
    path = Path(settings.log_file)
    path.parent.mkdir(parents=True, exist_ok=True)
    return logging.handlers.RotatingFileHandler(
        path,
        maxBytes=ROTATION_MAX_BYTES.get(settings.log_rotation, ROTATION_MAX_BYTES["daily"]),
        backupCount=settings.log_retention,
        encoding="utf-8",
    )


def get_service_logger(service_name: str) -> structlog.stdlib.BoundLogger:
    """Logger for a service component, e.g. ``EdgeCache``."""
    return structlog.get_logger(f"service.{service_name}")


def get_api_logger(api_name: str) -> structlog.stdlib.BoundLogger:
    """Logger for an HTTP-layer module."""
    return structlog.get_logger(f"api.{api_name}")
