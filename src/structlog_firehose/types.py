"""
Core value types shared by the hook, the record builder and the logger integrations.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Mapping, Optional

Transform = Callable[[Any], Any]

STREAM_NAME_KEY = "stream_name"
MESSAGE_KEY = "message"


class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"

    @classmethod
    def from_name(cls, name: str) -> "LogLevel":
        """Resolve a structlog method name or stdlib level name.

        Raises:
            ValueError: If the name does not map to a known level
        """
        normalized = name.strip().upper()
        normalized = _LEVEL_ALIASES.get(normalized, normalized)
        try:
            return cls(normalized)
        except ValueError:
            raise ValueError(f"Unknown log level: {name!r}") from None

    @classmethod
    def from_stdlib(cls, levelno: int) -> "LogLevel":
        """Map a numeric stdlib level, bucketing custom levels downward."""
        if levelno >= logging.CRITICAL:
            return cls.CRITICAL
        if levelno >= logging.ERROR:
            return cls.ERROR
        if levelno >= logging.WARNING:
            return cls.WARNING
        if levelno >= logging.INFO:
            return cls.INFO
        return cls.DEBUG


_LEVEL_ALIASES = {
    "WARN": "WARNING",
    "EXCEPTION": "ERROR",
    "FATAL": "CRITICAL",
    "NOTSET": "DEBUG",
}

# None (or an empty list) means "every level".
LevelSet = Optional[list[LogLevel]]


def level_enabled(levels: LevelSet, level: LogLevel) -> bool:
    """Check a level against a level set; an empty set matches everything."""
    if not levels:
        return True
    return level in levels


@dataclass(frozen=True)
class LogEntry:
    """A single log event as handed to the hook.

    `fields` belongs to the logger framework; the hook copies it and never
    mutates it.
    """

    message: str
    level: LogLevel = LogLevel.INFO
    fields: Mapping[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
