"""
Destination stream resolution.
"""

from __future__ import annotations

from .types import STREAM_NAME_KEY, LogEntry


class StreamResolver:
    """Pick the delivery stream for an entry.

    A ``stream_name`` field holding a string wins, even an empty one. A missing
    key or a non-string value falls back to the default name.
    """

    def __init__(self, default_stream_name: str = ""):
        self._default = default_stream_name

    @property
    def default_stream_name(self) -> str:
        return self._default

    def resolve(self, entry: LogEntry) -> str:
        if STREAM_NAME_KEY not in entry.fields:
            return self._default

        value = entry.fields[STREAM_NAME_KEY]
        if isinstance(value, str):
            return value
        return self._default
