"""Structured logging configuration.

structlog on top of stdlib logging. Request-scoped context (request_id) is
merged into every event through structlog.contextvars, so handlers only pass
the fields specific to what they are logging.
"""

import logging
import logging.config
import sys
from datetime import UTC, datetime
from typing import Any

import structlog
from structlog.stdlib import BoundLogger

from hotel_inventory.config import settings


def _add_timestamp(
    _logger: object,
    _method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Add ISO 8601 UTC timestamp with timezone offset."""
    event_dict["timestamp"] = datetime.now(UTC).isoformat()
    return event_dict


def configure_logging(level: str, json_output: bool = True) -> None:
    """Route structlog and stdlib records through one stdout handler.

    Call once at startup. ``json_output=False`` swaps the JSON renderer for
    structlog's console renderer.
    """
    shared: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        _add_timestamp,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    renderer: Any = (
        structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *shared,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "structured": {
                    "()": structlog.stdlib.ProcessorFormatter,
                    "processor": renderer,
                    "foreign_pre_chain": shared,
                },
            },
            "handlers": {
                "stdout": {
                    "class": "logging.StreamHandler",
                    "formatter": "structured",
                    "stream": sys.stdout,
                },
            },
            "loggers": {
                "": {"handlers": ["stdout"], "level": level, "propagate": True},
                # SQL echo is controlled by DB_ECHO, keep the engine logger quiet otherwise
                "sqlalchemy.engine": {"level": "WARNING"},
            },
        }
    )


configure_logging(settings.log_level, settings.log_json)


def get_logger(name: str) -> BoundLogger:
    """Get a structured logger, typically ``get_logger(__name__)``.

    Example:
        logger.info("hotel_created", hotel_id=hotel.id)
    """
    return structlog.get_logger(name)  # type: ignore[no-any-return]
