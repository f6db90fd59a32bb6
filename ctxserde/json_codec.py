"""Reading and writing JSON text through a serialization context."""

from __future__ import annotations

import io
import json
import math
from collections.abc import Mapping
from typing import Any

from .components import Context, SerdeError


class _JsonObject(dict):
    """A parsed JSON object whose ``items`` keeps repeated keys in order."""

    def __init__(self, pairs: list[tuple[str, Any]]) -> None:
        super().__init__(pairs)
        self._pairs = pairs

    def items(self):  # type: ignore[override]
        return list(self._pairs)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"invalid number: {name}")


def _json_key(key: Any) -> str:
    if isinstance(key, str):
        return key
    if isinstance(key, bool):
        return "true" if key else "false"
    if isinstance(key, int):
        return str(key)
    raise SerdeError("key must be a string")


def _jsonable(data: Any) -> Any:
    if data is None or isinstance(data, (bool, int, str)):
        return data
    if isinstance(data, float):
        return data if math.isfinite(data) else None
    if isinstance(data, (bytes, bytearray, memoryview)):
        return list(bytes(data))
    if isinstance(data, Mapping):
        return {_json_key(key): _jsonable(item) for key, item in data.items()}
    if isinstance(data, (list, tuple)):
        return [_jsonable(item) for item in data]
    raise SerdeError(f"value of type {type(data).__name__} cannot be written as JSON")


def to_json_string(context: Context, value_type: Any, value: Any) -> str:
    """Serialize ``value`` as a ``value_type`` into compact JSON text."""
    data = _jsonable(context.serialize(value_type, value))
    return json.dumps(data, ensure_ascii=False, separators=(",", ":"), allow_nan=False)


def from_json_reader(context: Context, value_type: Any, reader: Any) -> Any:
    """Read all JSON text from ``reader`` and deserialize it into a ``value_type``."""
    read = getattr(reader, "read", None)
    if not callable(read):
        raise TypeError(f"expected a readable object, found {type(reader).__name__}")
    text = read()
    try:
        if isinstance(text, (bytes, bytearray)):
            text = bytes(text).decode("utf-8")
        data = json.loads(
            text, object_pairs_hook=_JsonObject, parse_constant=_reject_constant
        )
    except RecursionError:
        raise SerdeError("recursion limit exceeded") from None
    except ValueError as exc:
        raise SerdeError(str(exc)) from exc
    return context.deserialize(value_type, data)


def from_json_string(context: Context, value_type: Any, source: str) -> Any:
    """Deserialize JSON text into a ``value_type``."""
    if not isinstance(source, str):
        raise TypeError(f"expected a string, found {type(source).__name__}")
    return from_json_reader(context, value_type, io.StringIO(source))