"""
Logger integrations: route structlog events and stdlib records into a FirehoseHook.

Both adapters do the level gate against `hook.levels()`; the hook never
filters on its own. Events from this package's loggers, and from the AWS SDK
that the sink itself drives, are never forwarded, so shipping a record can
not trigger another shipment.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from structlog.typing import EventDict, WrappedLogger

from structlog_firehose.types import LogEntry, LogLevel

from .core import PACKAGE_LOGGER_PREFIX

if TYPE_CHECKING:
    from structlog_firehose.hook import FirehoseHook

_SKIPPED_LOGGERS = (PACKAGE_LOGGER_PREFIX, "structlog", "botocore", "boto3", "urllib3", "s3transfer")

# Keys structlog uses for the entry itself rather than for fields.
_STRUCTLOG_RESERVED = {"event", "level", "_name", "_record", "_from_structlog"}

_LOG_RECORD_ATTRS = set(logging.LogRecord("", 0, "", 0, "", (), None).__dict__) | {"message", "asctime", "taskName"}


def _is_skipped(name: Any) -> bool:
    if not isinstance(name, str):
        return False
    return any(name == prefix or name.startswith(prefix + ".") for prefix in _SKIPPED_LOGGERS)


class FirehoseProcessor:
    """
    structlog processor that fires every wanted event into the hook.

    Place it after `add_log_level` and `add_logger_name` (or anywhere, falling
    back to the method name and `_name`). The event dict passes through
    unchanged so local renderers still see it; hook failures propagate to the
    logging call site.
    """

    def __init__(self, hook: "FirehoseHook"):
        self.hook = hook

    @staticmethod
    def _resolve_level(method_name: str, event_dict: EventDict) -> LogLevel:
        raw = event_dict.get("level") or method_name
        try:
            return LogLevel.from_name(str(raw))
        except ValueError:
            return LogLevel.INFO

    def __call__(self, logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
        if _is_skipped(event_dict.get("logger") or event_dict.get("_name")):
            return event_dict

        level = self._resolve_level(method_name, event_dict)
        if not self.hook.wants(level):
            return event_dict

        message = event_dict.get("event")
        fields = {k: v for k, v in event_dict.items() if k not in _STRUCTLOG_RESERVED}
        self.hook.fire(
            LogEntry(
                message="" if message is None else str(message),
                level=level,
                fields=fields,
            )
        )
        return event_dict


class FirehoseHandler(logging.Handler):
    """
    Ship standard library logging records through the hook.

    Attributes passed via ``extra=`` become record fields, next to ``logger``
    and, when present, the formatted ``exception``.
    """

    def __init__(self, hook: "FirehoseHook", level: int = logging.NOTSET):
        super().__init__(level)
        self.hook = hook

    def _fields(self, record: logging.LogRecord) -> dict[str, Any]:
        fields = {k: v for k, v in record.__dict__.items() if k not in _LOG_RECORD_ATTRS}
        fields["logger"] = record.name
        if record.exc_info:
            fields["exception"] = self._format_exception(record.exc_info)
        return fields

    def _format_exception(self, exc_info: Any) -> str:
        formatter = self.formatter or logging.Formatter()
        return formatter.formatException(exc_info)

    def emit(self, record: logging.LogRecord) -> None:
        if _is_skipped(record.name):
            return

        level = LogLevel.from_stdlib(record.levelno)
        if not self.hook.wants(level):
            return

        try:
            entry = LogEntry(
                message=record.getMessage(),
                level=level,
                fields=self._fields(record),
            )
            self.hook.fire(entry)
        except Exception:
            self.handleError(record)
