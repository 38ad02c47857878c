"""
structlog-firehose: ship structured log events to Amazon Kinesis Data Firehose.

Usage:
    from structlog_firehose import FirehoseHook, FirehoseSettings, configure_logging

    hook = FirehoseHook.new("app-logs", FirehoseSettings(region="ap-northeast-1"))
    hook.add_ignore("password")
    configure_logging(hook=hook)
"""

from .config import FirehoseSettings, Settings
from .exceptions import ConfigurationError, FirehoseHookError, SerializationError, SinkError
from .hook import FirehoseHook
from .logging import FirehoseHandler, FirehoseProcessor, configure_from_settings, configure_logging, get_logger
from .sinks import BaseSink, FirehoseSink, StdioSink
from .types import LogEntry, LogLevel

__all__ = [
    "BaseSink",
    "ConfigurationError",
    "FirehoseHandler",
    "FirehoseHook",
    "FirehoseHookError",
    "FirehoseProcessor",
    "FirehoseSettings",
    "FirehoseSink",
    "LogEntry",
    "LogLevel",
    "SerializationError",
    "Settings",
    "SinkError",
    "StdioSink",
    "configure_from_settings",
    "configure_logging",
    "get_logger",
]
