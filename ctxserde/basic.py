"""Providers for plain values, strings, bytes and conversions between types."""

from __future__ import annotations

import types
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, Union, get_args, get_origin

from .components import (
    Context,
    SerdeError,
    ValueDeserializer,
    ValueSerializer,
    _type_name,
)

_SCALARS = (type(None), bool, int, float, str, bytes)
_BYTES_LIKE = (bytes, bytearray, memoryview)
_CONVERSION_ERRORS = (ValueError, TypeError, ArithmeticError)


def _to_data(value: Any) -> Any:
    if isinstance(value, _SCALARS):
        return value
    if isinstance(value, (bytearray, memoryview)):
        return bytes(value)
    if isinstance(value, Mapping):
        return {_to_data(key): _to_data(item) for key, item in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [_to_data(item) for item in value]
    raise SerdeError(f"value of type {type(value).__name__} is not plain data")


def _mismatch(value_type: Any, data: Any) -> SerdeError:
    return SerdeError(
        f"invalid type: expected {_type_name(value_type)}, found {type(data).__name__}"
    )


def _check_native(value_type: Any, data: Any) -> Any:
    if value_type is Any or value_type is object:
        return data
    if value_type is None or value_type is type(None):
        if data is None:
            return None
        raise _mismatch(type(None), data)

    origin = get_origin(value_type)
    args = get_args(value_type)
    if origin is Union or origin is types.UnionType:
        for option in args:
            try:
                return _check_native(option, data)
            except SerdeError:
                continue
        raise _mismatch(value_type, data)
    if origin is list:
        if not isinstance(data, (list, tuple)):
            raise _mismatch(value_type, data)
        return [_check_native(args[0], item) for item in data]
    if origin is tuple:
        if not isinstance(data, (list, tuple)):
            raise _mismatch(value_type, data)
        if len(args) == 2 and args[1] is Ellipsis:
            return tuple(_check_native(args[0], item) for item in data)
        if len(args) != len(data):
            raise SerdeError(
                f"invalid length {len(data)}, expected a tuple of {len(args)}"
            )
        return tuple(_check_native(arg, item) for arg, item in zip(args, data))
    if origin in (set, frozenset):
        if not isinstance(data, (list, tuple, set, frozenset)):
            raise _mismatch(value_type, data)
        return origin(_check_native(args[0], item) for item in data)
    if origin is dict:
        if not isinstance(data, Mapping):
            raise _mismatch(value_type, data)
        key_type, item_type = args
        return {
            _check_native(key_type, key): _check_native(item_type, item)
            for key, item in data.items()
        }

    if isinstance(value_type, type):
        if isinstance(data, bool) and value_type is not bool and value_type is not object:
            raise _mismatch(value_type, data)
        if value_type is float and isinstance(data, int):
            return float(data)
        if isinstance(data, value_type):
            return data
    raise _mismatch(value_type, data)


def _expect_bytes(data: Any) -> bytes:
    if not isinstance(data, _BYTES_LIKE):
        raise SerdeError(f"invalid type: expected bytes, found {type(data).__name__}")
    return bytes(data)


def _build_from_bytes(value_type: Any, data: bytes) -> Any:
    return data if value_type is bytes else value_type(data)


def _fallible(convert: Callable[[Any], Any], value: Any) -> Any:
    try:
        return convert(value)
    except _CONVERSION_ERRORS as exc:
        raise SerdeError(str(exc)) from exc


class UseSerde(ValueSerializer, ValueDeserializer):
    """Passes plain data (numbers, strings, lists, dicts) through unchanged."""

    def serialize(self, context: Context, value_type: Any, value: Any) -> Any:
        return _to_data(value)

    def deserialize(self, context: Context, value_type: Any, data: Any) -> Any:
        return _check_native(value_type, data)


class SerializeString(ValueSerializer, ValueDeserializer):
    """Serializes strings as strings, refusing anything else."""

    def serialize(self, context: Context, value_type: Any, value: Any) -> str:
        if not isinstance(value, str):
            raise SerdeError(f"expected a string, found {type(value).__name__}")
        return str(value)

    def deserialize(self, context: Context, value_type: Any, data: Any) -> str:
        if not isinstance(data, str):
            raise SerdeError(f"invalid type: expected string, found {type(data).__name__}")
        return str(data)


class SerializeBytes(ValueSerializer, ValueDeserializer):
    """Serializes bytes-like values as raw bytes."""

    def serialize(self, context: Context, value_type: Any, value: Any) -> bytes:
        if not isinstance(value, _BYTES_LIKE):
            raise SerdeError(f"expected bytes, found {type(value).__name__}")
        return bytes(value)

    def deserialize(self, context: Context, value_type: Any, data: Any) -> Any:
        return _build_from_bytes(value_type, _expect_bytes(data))


class TryDeserializeBytes(ValueDeserializer):
    """Builds a value from raw bytes with a constructor that may reject them."""

    def deserialize(self, context: Context, value_type: Any, data: Any) -> Any:
        raw = _expect_bytes(data)
        return _fallible(lambda payload: _build_from_bytes(value_type, payload), raw)


@dataclass(frozen=True)
class SerializeDeref(ValueSerializer):
    """Serializes the value a wrapper points to.

    ``unwrap`` extracts the inner value (identity by default); the inner type is
    ``target_type`` or else the first type argument of the wrapper type.
    """

    unwrap: Callable[[Any], Any] | None = None
    target_type: Any = None

    def serialize(self, context: Context, value_type: Any, value: Any) -> Any:
        target = self.target_type
        if target is None:
            args = get_args(value_type)
            if not args:
                raise SerdeError(
                    f"cannot tell what {_type_name(value_type)} dereferences to"
                )
            target = args[0]
        inner = value if self.unwrap is None else self.unwrap(value)
        return context.serialize(target, inner)


class SerializeWithDisplay(ValueSerializer):
    """Serializes a value as its string form."""

    def serialize(self, context: Context, value_type: Any, value: Any) -> Any:
        return context.serialize(str, str(value))


@dataclass(frozen=True)
class DeserializeWithFromStr(ValueDeserializer):
    """Parses a value from a string; ``parse`` defaults to the type itself."""

    parse: Callable[[str], Any] | None = None

    def deserialize(self, context: Context, value_type: Any, data: Any) -> Any:
        text = context.deserialize(str, data)
        parse = value_type if self.parse is None else self.parse
        return _fallible(parse, text)


@dataclass(frozen=True)
class _Conversion:
    other: Any
    to_other: Callable[[Any], Any] | None = None
    from_other: Callable[[Any], Any] | None = None

    def _forward(self) -> Callable[[Any], Any]:
        return self.other if self.to_other is None else self.to_other

    def _backward(self, value_type: Any) -> Callable[[Any], Any]:
        return value_type if self.from_other is None else self.from_other


class SerializeFrom(_Conversion, ValueSerializer, ValueDeserializer):
    """Serializes through another type, converting on the way in and out."""

    def serialize(self, context: Context, value_type: Any, value: Any) -> Any:
        return context.serialize(self.other, self._forward()(value))

    def deserialize(self, context: Context, value_type: Any, data: Any) -> Any:
        source = context.deserialize(self.other, data)
        return self._backward(value_type)(source)


class TrySerializeFrom(_Conversion, ValueSerializer, ValueDeserializer):
    """Like SerializeFrom, but conversion failures become SerdeError."""

    def serialize(self, context: Context, value_type: Any, value: Any) -> Any:
        return context.serialize(self.other, _fallible(self._forward(), value))

    def deserialize(self, context: Context, value_type: Any, data: Any) -> Any:
        source = context.deserialize(self.other, data)
        return _fallible(self._backward(value_type), source)


@dataclass(frozen=True)
class DeserializeDefault(ValueDeserializer):
    """Yields a default value for null data and defers to ``provider`` otherwise."""

    provider: ValueDeserializer
    default: Callable[[], Any] | None = None

    def deserialize(self, context: Context, value_type: Any, data: Any) -> Any:
        if data is None:
            return value_type() if self.default is None else self.default()
        return self.provider.deserialize(context, value_type, data)