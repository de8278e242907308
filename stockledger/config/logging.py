"""
Structured logging for the stock ledger.

Development runs get coloured console output; every other environment
emits one JSON object per event so ledger activity can be shipped to a
log store and filtered by record_id.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.types import Processor

from stockledger.config.settings import get_settings

# Libraries that log every statement at DEBUG
QUIET_LOGGERS = ("aiosqlite", "asyncio")


def add_app_context(
    logger: logging.Logger, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Stamp events with the application name, version and environment."""
    settings = get_settings()
    event_dict.setdefault("app", settings.app_name)
    event_dict.setdefault("version", settings.app_version)
    event_dict.setdefault("environment", settings.environment)
    return event_dict


def build_processors(json_logs: bool) -> list[Processor]:
    """Processor chain ending in the console or JSON renderer."""
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        add_app_context,
        structlog.processors.StackInfoRenderer(),
    ]
    if json_logs:
        processors += [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))
    return processors


def configure_logging(
    log_level: str | None = None,
    json_logs: bool | None = None,
) -> None:
    """
    Configure structlog and the stdlib root logger.

    Args:
        log_level: Overrides the LOG_LEVEL setting
        json_logs: Force JSON (True) or console (False) output; by default
            JSON is used outside development
    """
    settings = get_settings()
    level_name = (log_level or settings.log_level).upper()
    if json_logs is None:
        json_logs = settings.environment != "development"

    structlog.configure(
        processors=build_processors(json_logs),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    level = getattr(logging, level_name)
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)
    # basicConfig is a no-op once handlers exist
    logging.getLogger().setLevel(level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)
