"""
Per-field ignore and transform rules.
"""

from __future__ import annotations

import threading
from types import MappingProxyType
from typing import Any, Mapping, NamedTuple, Optional

from .types import Transform


class PolicySnapshot(NamedTuple):
    ignored: frozenset[str]
    filters: Mapping[str, Optional[Transform]]


class FieldPolicy:
    """Ignored field names and per-field transforms.

    Both collections live in one immutable snapshot that writers replace under
    a lock. Readers grab the current snapshot without locking, so one record is
    always built against a consistent policy.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._snapshot = PolicySnapshot(frozenset(), MappingProxyType({}))

    @property
    def ignored(self) -> frozenset[str]:
        return self._snapshot.ignored

    @property
    def filters(self) -> Mapping[str, Optional[Transform]]:
        return self._snapshot.filters

    def snapshot(self) -> PolicySnapshot:
        return self._snapshot

    def add_ignore(self, name: str) -> None:
        with self._lock:
            current = self._snapshot
            if name in current.ignored:
                return
            self._snapshot = current._replace(ignored=current.ignored | {name})

    def add_filter(self, name: str, transform: Optional[Transform]) -> None:
        with self._lock:
            current = self._snapshot
            filters = dict(current.filters)
            filters[name] = transform
            self._snapshot = current._replace(filters=MappingProxyType(filters))

    def apply(self, data: Mapping[str, Any]) -> dict[str, Any]:
        """Drop ignored keys and run registered transforms over the rest."""
        ignored, filters = self._snapshot
        result: dict[str, Any] = {}
        for key, value in data.items():
            if key in ignored:
                continue
            transform = filters.get(key)
            if transform is not None:
                value = transform(value)
            result[key] = value
        return result
