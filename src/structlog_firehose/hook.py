"""
FirehoseHook: the entry point a logger calls for every event it routes here.

    hook = FirehoseHook.new("app-logs", FirehoseSettings(region="ap-northeast-1"))
    hook.set_levels([LogLevel.WARNING, LogLevel.ERROR])
    hook.add_ignore("password")
    hook.add_filter("user", lambda user: user.id)

The logger decides which events reach `fire` by consulting `levels()` (or the
`wants()` shortcut); `fire` itself never filters by level.
"""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING, Iterable, Optional

from .config import SinkKind
from .logging import get_logger
from .policy import FieldPolicy
from .record import RecordBuilder
from .sinks import BaseSink, FirehoseSink, StdioSink
from .stream import StreamResolver
from .types import LevelSet, LogEntry, LogLevel, Transform, level_enabled

if TYPE_CHECKING:
    import boto3

    from .config import FirehoseSettings, Settings

logger = get_logger("structlog_firehose.hook")


class FirehoseHook:
    """Resolve stream, build record, hand it to the sink.

    Args:
        stream_name: Default delivery stream, used when an entry carries no
            usable ``stream_name`` field
        sink: Destination for serialized records
    """

    def __init__(self, stream_name: str, sink: BaseSink):
        self._sink = sink
        self._resolver = StreamResolver(stream_name)
        self._policy = FieldPolicy()
        self._builder = RecordBuilder(self._policy)
        self._levels_lock = threading.Lock()
        self._levels: LevelSet = None

    # =========================================================================
    # Construction
    # =========================================================================

    @classmethod
    def new(cls, stream_name: str, config: "FirehoseSettings") -> "FirehoseHook":
        """Create a hook backed by Firehose, configured from settings.

        Raises:
            ConfigurationError: If region or credentials are missing or invalid
        """
        return cls(stream_name, FirehoseSink.from_settings(config))

    @classmethod
    def with_session(
        cls,
        stream_name: str,
        session: Optional["boto3.session.Session"],
        *,
        endpoint_url: Optional[str] = None,
    ) -> "FirehoseHook":
        """Create a hook backed by Firehose from a pre-configured boto3 session.

        Raises:
            ConfigurationError: If the session is missing, has no region or no credentials
        """
        return cls(stream_name, FirehoseSink.from_session(session, endpoint_url=endpoint_url))

    @classmethod
    def from_settings(cls, settings: Optional["Settings"] = None) -> "FirehoseHook":
        """Create a fully configured hook (sink, levels, ignores, newline) from settings."""
        if settings is None:
            from .config import settings as default_settings

            settings = default_settings

        config = settings.firehose
        if config.sink == SinkKind.STDIO:
            hook = cls(config.stream_name, StdioSink())
        else:
            hook = cls.new(config.stream_name, config)

        hook.set_levels(list(config.levels) if config.levels is not None else None)
        for name in config.ignore_fields:
            hook.add_ignore(name)
        hook.add_newline(config.add_newline)

        logger.info(
            "firehose_hook_configured",
            stream_name=config.stream_name,
            sink=config.sink.value,
            levels=[level.value for level in config.levels] if config.levels else None,
            ignore_fields=list(config.ignore_fields),
        )
        return hook

    # =========================================================================
    # Levels
    # =========================================================================

    def levels(self) -> LevelSet:
        """Levels this hook wants; None means all of them."""
        with self._levels_lock:
            return None if self._levels is None else list(self._levels)

    def set_levels(self, levels: Optional[Iterable[LogLevel]]) -> None:
        """Replace the level set. None or an empty list restores "all levels"."""
        with self._levels_lock:
            self._levels = None if levels is None else list(levels)

    def wants(self, level: LogLevel) -> bool:
        return level_enabled(self.levels(), level)

    # =========================================================================
    # Record policy
    # =========================================================================

    @property
    def default_stream_name(self) -> str:
        return self._resolver.default_stream_name

    @property
    def policy(self) -> FieldPolicy:
        return self._policy

    @property
    def sink(self) -> BaseSink:
        return self._sink

    def add_ignore(self, name: str) -> None:
        """Drop the named field from every record."""
        self._policy.add_ignore(name)

    def add_filter(self, name: str, transform: Optional[Transform]) -> None:
        """Transform the named field's value before serialization. None disables it."""
        self._policy.add_filter(name, transform)

    def add_newline(self, enabled: bool) -> None:
        """Append a trailing newline to every record (line-delimited S3 output)."""
        self._builder.add_newline = enabled

    # =========================================================================
    # Dispatch
    # =========================================================================

    def stream_name_for(self, entry: LogEntry) -> str:
        return self._resolver.resolve(entry)

    def build_record(self, entry: LogEntry) -> bytes:
        return self._builder.build(entry)

    def fire(self, entry: LogEntry) -> None:
        """Ship one entry. Sink failures propagate unchanged; nothing is retried.

        Raises:
            SerializationError: If the record cannot be serialized
            Exception: Whatever the sink raises (SinkError for FirehoseSink)
        """
        stream_name = self._resolver.resolve(entry)
        payload = self._builder.build(entry)
        self._sink.put(stream_name, payload)

    def close(self) -> None:
        self._sink.close()
