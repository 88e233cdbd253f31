"""
Structured Logging Module

This module provides structured logging with correlation ID support.

Both structlog loggers (get_logger) and plain stdlib loggers
(logging.getLogger) are rendered by the same structlog ProcessorFormatter,
so every record carries timestamp, level, logger name and, when set, the
correlation ID of the current SSE session.

Records are written to stderr by default: with the stdio transport,
stdout carries the MCP protocol stream.

Pattern: Structured logging for observability
Pattern: Singleton configuration (configure once at startup)
"""

import contextvars
import logging
import sys
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Generator, Optional, TextIO

import structlog
from structlog.types import EventDict, Processor


# =============================================================================
# Configuration State
# =============================================================================

_configured: bool = False
_handler: Optional[logging.Handler] = None


# =============================================================================
# Correlation ID Context
# =============================================================================

_correlation_id_var: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar(
    "correlation_id", default=None
)


def get_correlation_id() -> Optional[str]:
    """
    Get the current correlation ID.

    Returns:
        Correlation ID if set, None otherwise
    """
    return _correlation_id_var.get()


@contextmanager
def correlation_id_context(correlation_id: str) -> Generator[None, None, None]:
    """
    Context manager for setting correlation ID.

    Args:
        correlation_id: Unique identifier for request tracing

    Example:
        >>> with correlation_id_context("session-12345"):
        ...     logger.info("sse client connected")
    """
    token = _correlation_id_var.set(correlation_id)
    try:
        yield
    finally:
        _correlation_id_var.reset(token)


# =============================================================================
# Custom Processors
# =============================================================================


def add_correlation_id(
    logger: Any, method_name: str, event_dict: EventDict
) -> EventDict:
    """Add correlation ID to log event if set."""
    correlation_id = get_correlation_id()
    if correlation_id is not None:
        event_dict["correlation_id"] = correlation_id
    return event_dict


def add_timestamp(
    logger: Any, _method_name: str, event_dict: EventDict
) -> EventDict:
    """Add ISO 8601 UTC timestamp to log event."""
    event_dict["timestamp"] = datetime.now(timezone.utc).isoformat()
    return event_dict


def rename_level(
    logger: Any, _method_name: str, event_dict: EventDict
) -> EventDict:
    """Rename log_level to level for cleaner output."""
    if "log_level" in event_dict:
        event_dict["level"] = event_dict.pop("log_level")
    return event_dict


# =============================================================================
# Singleton Configuration
# =============================================================================


def configure_logging(
    level: str = "INFO",
    stream: Optional[TextIO] = None,
    json_logs: bool = True,
    force: bool = False,
) -> None:
    """
    Configure structlog and the stdlib root logger.

    This should be called once at startup. Subsequent calls are no-ops
    unless force=True, in which case the previous handler is replaced.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        stream: Output stream (default: sys.stderr)
        json_logs: Render JSON lines; otherwise a console-friendly format
        force: Force reconfiguration

    Example:
        >>> configure_logging(level="DEBUG", force=True)
        >>> logger = get_logger(__name__)
    """
    global _configured, _handler

    if _configured and not force:
        return

    shared_processors: list[Processor] = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        add_timestamp,
        add_correlation_id,
        rename_level,
    ]

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *shared_processors,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        cache_logger_on_first_use=False,
    )

    renderer: Processor = (
        structlog.processors.JSONRenderer()
        if json_logs
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    if _handler is not None:
        root.removeHandler(_handler)
    root.addHandler(handler)
    root.setLevel(_level_to_int(level))

    _handler = handler
    _configured = True


def reset_logging() -> None:
    """
    Reset logging configuration state.

    WARNING: This should only be used in tests.
    """
    global _configured, _handler
    if _handler is not None:
        logging.getLogger().removeHandler(_handler)
    _handler = None
    _configured = False
    structlog.reset_defaults()


# =============================================================================
# Logger Factory
# =============================================================================


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """
    Get a configured structured logger.

    Auto-configures logging with defaults if nothing configured it yet.

    Args:
        name: Logger name (typically module name)

    Returns:
        A structlog logger backed by the stdlib logger of that name

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("tool called", tool="clickhouse_listServices")
    """
    configure_logging()
    return structlog.get_logger(name)


def _level_to_int(level: str) -> int:
    """Convert level string to logging int."""
    levels = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR,
        "CRITICAL": logging.CRITICAL,
    }
    return levels.get(level.upper(), logging.INFO)
