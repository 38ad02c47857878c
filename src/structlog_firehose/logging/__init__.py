"""
Logging for structlog-firehose.

- get_logger / configure_logging: structlog setup with the hook in the processor chain
- FirehoseProcessor: structlog processor that fires events into a FirehoseHook
- FirehoseHandler: stdlib logging.Handler doing the same for LogRecords

Library: structlog + orjson.
"""

from .core import configure_from_settings, configure_logging, get_logger
from .interceptors import FirehoseHandler, FirehoseProcessor

__all__ = ["FirehoseHandler", "FirehoseProcessor", "configure_from_settings", "configure_logging", "get_logger"]
