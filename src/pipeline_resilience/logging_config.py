"""Structured logging configuration using structlog.

Provides JSON output for production (parseable by the workflow host's log
collector) and pretty console output for development.

Every decision the engine makes is logged by the `pipeline_resilience.resilience`
loggers. At high failure rates those lines dominate the output, so their level
is configured separately (DECISION_LOG_LEVEL) from the service log level.
"""

import logging
import sys
from enum import Enum
from typing import Optional

import structlog
from structlog.types import EventDict, WrappedLogger

from pipeline_resilience import __version__

DECISION_LOGGER = "pipeline_resilience.resilience"


def add_app_context(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Add application name and engine version to all log events."""
    event_dict["app"] = "pipeline-resilience"
    event_dict["engine_version"] = __version__
    return event_dict


def render_enum_values(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Log enums (ErrorKind, DecisionAction, ...) by value, e.g. "rate-limited"."""
    for key, value in event_dict.items():
        if isinstance(value, Enum):
            event_dict[key] = value.value
    return event_dict


def configure_logging(
    log_level: str = "INFO",
    environment: str = "development",
    decision_log_level: Optional[str] = None,
) -> None:
    """Configure structlog for structured logging.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        environment: Environment name (development, production)
        decision_log_level: Level for per-decision engine logs
            (defaults to log_level)

    In production mode:
        - JSON output for machine parsing
        - ISO timestamps
        - Exception info included

    In development mode:
        - Pretty colored console output
    """
    log_level_int = getattr(logging, log_level.upper(), logging.INFO)
    decision_level_int = getattr(logging, (decision_log_level or log_level).upper(), log_level_int)

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        add_app_context,
        render_enum_values,
    ]

    is_production = environment.lower() == "production"

    if is_production:
        shared_processors.append(structlog.processors.format_exc_info)
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=shared_processors
        + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=shared_processors,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    # Clear existing handlers to avoid duplicates
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level_int)

    logging.getLogger(DECISION_LOGGER).setLevel(decision_level_int)

    # Uvicorn access lines duplicate RequestTracingMiddleware output
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)

    logger = structlog.get_logger(__name__)
    logger.info(
        "Logging configured",
        log_level=log_level,
        decision_log_level=logging.getLevelName(decision_level_int),
        environment=environment,
        renderer="json" if is_production else "console",
    )
