"""
Core logging configuration and initialization logic.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Optional

import orjson
import structlog
from structlog.typing import EventDict, Processor, WrappedLogger

if TYPE_CHECKING:
    from structlog_firehose.config import Settings
    from structlog_firehose.hook import FirehoseHook

PACKAGE_LOGGER_PREFIX = "structlog_firehose"


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(_name=name or "root")


# =============================================================================
# Structlog Processors
# =============================================================================


def add_timestamp(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Add ISO 8601 timestamp to log event."""
    event_dict["timestamp"] = datetime.now(timezone.utc).isoformat()
    return event_dict


def add_logger_name(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Add logger name to log event."""
    event_dict["logger"] = event_dict.get("_name", "root")
    event_dict.pop("_name", None)
    return event_dict


def _orjson_serializer(v: Any, **kwargs: Any) -> str:
    return orjson.dumps(v, default=str, option=orjson.OPT_UTC_Z | orjson.OPT_NAIVE_UTC).decode()


# =============================================================================
# Configuration Logic
# =============================================================================


def _build_processors(hook: Optional["FirehoseHook"], fmt: str) -> list[Processor]:
    from .interceptors import FirehoseProcessor

    processors: list[Processor] = [
        structlog.stdlib.add_log_level,
        add_timestamp,
        add_logger_name,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    if hook is not None:
        processors.append(FirehoseProcessor(hook))

    if fmt.lower() == "json":
        processors.append(structlog.processors.JSONRenderer(serializer=_orjson_serializer))
    else:
        processors.append(structlog.dev.ConsoleRenderer())
    return processors


def configure_logging(
    *,
    level: str = "INFO",
    fmt: str = "console",
    hook: Optional["FirehoseHook"] = None,
    capture_stdlib: bool = False,
) -> None:
    """
    Configure structlog with the Firehose hook in its processor chain.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        fmt: Local output format (console, json)
        hook: Hook to ship events through; None keeps logging local-only
        capture_stdlib: Also attach a FirehoseHandler to the stdlib root logger
    """
    from .interceptors import FirehoseHandler

    numeric_level = getattr(logging, level.upper(), logging.INFO)

    structlog.configure(
        processors=_build_processors(hook, fmt),
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )

    root_logger = logging.getLogger()
    root_logger.handlers = [h for h in root_logger.handlers if not isinstance(h, FirehoseHandler)]
    if hook is not None and capture_stdlib:
        root_logger.setLevel(numeric_level)
        root_logger.addHandler(FirehoseHandler(hook))


def configure_from_settings(settings: Optional["Settings"] = None) -> "FirehoseHook":
    """Build the hook from settings and configure logging around it."""
    from structlog_firehose.hook import FirehoseHook

    if settings is None:
        from structlog_firehose.config import settings as default_settings

        settings = default_settings

    hook = FirehoseHook.from_settings(settings)
    configure_logging(
        level=settings.logging.level.value,
        fmt=settings.logging.format.value,
        hook=hook,
        capture_stdlib=settings.logging.capture_stdlib,
    )
    return hook
