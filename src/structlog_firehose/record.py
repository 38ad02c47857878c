"""
Record building: entry fields + message + policy -> canonical JSON bytes.
"""

from __future__ import annotations

import orjson

from .exceptions import SerializationError
from .formatting import ensure_finite, format_data, orjson_dumps
from .policy import FieldPolicy
from .types import MESSAGE_KEY, LogEntry


class RecordBuilder:
    """Builds the JSON payload shipped for one log entry.

    Steps:
    1. copy the entry fields
    2. inject ``message`` from the entry unless a field already carries one
    3. drop ignored fields, apply transforms
    4. normalize every value with ``format_data``
    5. serialize with lexicographically sorted keys
    """

    def __init__(self, policy: FieldPolicy | None = None, *, add_newline: bool = False):
        self.policy = policy or FieldPolicy()
        self.add_newline = add_newline

    def build_data(self, entry: LogEntry) -> dict:
        """Return the record as a dict, before serialization."""
        data = dict(entry.fields)
        if MESSAGE_KEY not in data:
            data[MESSAGE_KEY] = entry.message

        data = self.policy.apply(data)
        return {key: format_data(value) for key, value in data.items()}

    def build(self, entry: LogEntry) -> bytes:
        """Serialize an entry.

        Raises:
            SerializationError: If a value (or key) has no JSON representation,
                or holds NaN or an infinity
        """
        record = self.build_data(entry)
        for key, value in record.items():
            try:
                ensure_finite(value, str(key))
            except ValueError as exc:
                raise SerializationError(
                    f"Failed to serialize field {key!r}: {exc}",
                    details={"field": str(key)},
                ) from exc

        try:
            payload = orjson_dumps(record)
        except orjson.JSONEncodeError as exc:
            raise SerializationError(
                f"Failed to serialize log record: {exc}",
                details={"fields": sorted(str(k) for k in record)},
            ) from exc

        if self.add_newline:
            payload += b"\n"
        return payload
