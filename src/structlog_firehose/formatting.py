"""
Field value normalization and JSON serialization.

`format_data` dispatches on a small fixed set of capabilities, in order:

1. JSONMarshaler - values the serializer marshals itself (datetimes, UUIDs,
   enums, dataclasses, pydantic models, objects exposing ``__json__``)
2. Stringer - types with their own zero-argument ``__str__`` returning ``str``
3. ErrorLike - exceptions, rendered as their message
4. anything else, left to the serializer's ``default`` hook

Library: orjson for serialization, matching the sink payload format.
"""

from __future__ import annotations

import dataclasses
import inspect
import math
import uuid
from datetime import date, datetime, time
from enum import Enum
from typing import Any, Protocol, runtime_checkable

import orjson
from pydantic import BaseModel

from .exceptions import SerializationError

ORJSON_OPTIONS = orjson.OPT_SORT_KEYS | orjson.OPT_UTC_Z | orjson.OPT_NAIVE_UTC

_PLAIN_TYPES = (str, bool, int, float, list, tuple, dict, type(None))
_NATIVE_TYPES = (datetime, date, time, uuid.UUID, Enum)
_DEFAULT_STR_METHODS = (object.__str__, BaseException.__str__)
_POSITIONAL = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)

# orjson gives up past this nesting depth anyway.
_MAX_DEPTH = 254


@runtime_checkable
class JSONMarshaler(Protocol):
    """Objects that provide their own JSON-compatible representation."""

    def __json__(self) -> Any: ...


def is_marshaler(value: Any) -> bool:
    if isinstance(value, _NATIVE_TYPES) or isinstance(value, BaseModel):
        return True
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return True
    return isinstance(value, JSONMarshaler) and callable(getattr(value, "__json__", None))


def _takes_no_arguments(method: Any) -> bool:
    try:
        signature = inspect.signature(method)
    except (TypeError, ValueError):
        # C slot wrappers expose no signature and always take only self.
        return True

    params = list(signature.parameters.values())
    if not params or params[0].kind not in _POSITIONAL:
        return any(p.kind is inspect.Parameter.VAR_POSITIONAL for p in params)

    for param in params[1:]:
        if param.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD):
            continue
        if param.default is inspect.Parameter.empty:
            return False
    return True


def stringify(value: Any) -> str | None:
    """Return the value's own string form, or None if it is not a Stringer.

    Only an own ``__str__`` with a zero-argument signature that returns a
    ``str`` qualifies.

    Raises:
        SerializationError: If the ``__str__`` itself raises
    """
    method = getattr(type(value), "__str__", None)
    if method is None or method in _DEFAULT_STR_METHODS or not callable(method):
        return None
    if not _takes_no_arguments(method):
        return None

    try:
        result = method(value)
    except Exception as exc:
        raise SerializationError(
            f"{type(value).__name__}.__str__ failed: {exc}",
            details={"type": type(value).__name__},
        ) from exc
    if isinstance(result, str):
        return result
    return None


def ensure_finite(value: Any, path: str, _depth: int = 0) -> None:
    """Reject NaN and infinities anywhere inside a field value.

    orjson writes them as ``null``, which would silently lose the value.

    Raises:
        ValueError: Naming the dotted path of the first non-finite float
    """
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ValueError(f"Non-finite float at {path}: {value!r}")
        return
    if _depth >= _MAX_DEPTH:
        return

    if isinstance(value, dict):
        for key, item in value.items():
            ensure_finite(item, f"{path}.{key}", _depth + 1)
    elif isinstance(value, (list, tuple)):
        for index, item in enumerate(value):
            ensure_finite(item, f"{path}[{index}]", _depth + 1)
    elif dataclasses.is_dataclass(value) and not isinstance(value, type):
        for field in dataclasses.fields(value):
            ensure_finite(getattr(value, field.name, None), f"{path}.{field.name}", _depth + 1)


def _slot_names(value: Any) -> list[str]:
    names: list[str] = []
    for klass in type(value).__mro__:
        slots = klass.__dict__.get("__slots__", ())
        if isinstance(slots, str):
            slots = (slots,)
        names.extend(name for name in slots if name not in names)
    return names


def _public_attributes(value: Any) -> dict[str, Any] | None:
    if isinstance(value, tuple) and callable(getattr(value, "_asdict", None)):
        return dict(value._asdict())

    attrs: dict[str, Any] = {}
    found = False
    for name in _slot_names(value):
        if name in ("__dict__", "__weakref__"):
            continue
        found = True
        if name.startswith("_") or not hasattr(value, name):
            continue
        attrs[name] = getattr(value, name)

    if hasattr(value, "__dict__"):
        found = True
        attrs.update((k, v) for k, v in vars(value).items() if not k.startswith("_"))
    return attrs if found else None


def error_message(error: BaseException) -> str:
    if not error.args:
        return type(error).__name__
    return ", ".join(str(arg) for arg in error.args)


def format_data(value: Any) -> Any:
    """Normalize one field value into something the serializer can encode."""
    if isinstance(value, _PLAIN_TYPES):
        return value

    if is_marshaler(value):
        return value

    text = stringify(value)
    if text is not None:
        return text

    if isinstance(value, BaseException):
        return error_message(value)

    return value


def json_default(value: Any) -> Any:
    """orjson ``default`` hook for values orjson cannot encode on its own.

    Structures returned from here are checked for non-finite floats, since
    orjson encodes them without another look.

    Raises:
        TypeError: If the value has no JSON representation
        ValueError: If the representation holds NaN or an infinity
    """
    if isinstance(value, BaseModel):
        return _checked(value.model_dump(mode="json"), value)
    if isinstance(value, JSONMarshaler) and callable(getattr(value, "__json__", None)):
        return _checked(value.__json__(), value)

    # Nested values get the same treatment as top-level fields.
    text = stringify(value)
    if text is not None:
        return text
    if isinstance(value, BaseException):
        return error_message(value)

    attrs = _public_attributes(value)
    if attrs is not None:
        return _checked(attrs, value)
    raise TypeError(f"Type is not JSON serializable: {type(value).__name__}")


def _checked(result: Any, source: Any) -> Any:
    ensure_finite(result, type(source).__name__)
    return result


def orjson_dumps(v: Any) -> bytes:
    """Serialize with sorted keys and UTC timestamps."""
    return orjson.dumps(v, default=json_default, option=ORJSON_OPTIONS)
