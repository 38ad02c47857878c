"""
Exception hierarchy for structlog-firehose.

Three failure kinds, all rooted at FirehoseHookError so callers can catch them
together:

- ConfigurationError: invalid construction parameters, raised while building a hook or sink
- SerializationError: a record cannot be represented as JSON, raised from `fire`
- SinkError: the ingestion call failed, raised by the Firehose sink
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class FirehoseHookError(Exception):
    """Base exception for all hook failures."""

    def __init__(
        self,
        message: str,
        *,
        code: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.details = details or {}


class ConfigurationError(FirehoseHookError):
    """Invalid or incomplete hook/sink configuration."""

    def __init__(self, message: str, *, code: str = "invalid_configuration", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code=code, details=details)


class SerializationError(FirehoseHookError):
    """A log record could not be serialized to JSON."""

    def __init__(self, message: str, *, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="serialization_failed", details=details)


class SinkError(FirehoseHookError):
    """The downstream ingestion call failed."""

    def __init__(self, message: str, *, stream_name: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="sink_put_failed", details={"stream_name": stream_name, **(details or {})})
        self.stream_name = stream_name
