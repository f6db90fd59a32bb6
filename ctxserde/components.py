"""Serialization contexts and the provider interfaces they dispatch to."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Hashable, Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol, get_origin


class SerdeError(ValueError):
    """Raised when a value cannot be serialized or deserialized."""


class ValueSerializer(ABC):
    """Turns a value of a given type into plain data, with help from a context."""

    @abstractmethod
    def serialize(self, context: Context, value_type: Any, value: Any) -> Any:
        """Return the plain-data form of ``value``."""


class ValueDeserializer(ABC):
    """Builds a value of a given type from plain data, with help from a context."""

    @abstractmethod
    def deserialize(self, context: Context, value_type: Any, data: Any) -> Any:
        """Return a value of ``value_type`` built from ``data``."""


class _Allocator(Protocol):
    def alloc(self, context: Context, value: Any) -> Any: ...


def _type_name(value_type: Any) -> str:
    if isinstance(value_type, type) and get_origin(value_type) is None:
        return value_type.__qualname__
    return repr(value_type)


def _lookup(table: Mapping[Hashable, Any], value_type: Any, kind: str) -> Any:
    try:
        return table[value_type]
    except KeyError:
        pass
    except TypeError:
        raise SerdeError(f"unhashable value type {value_type!r}") from None
    origin = get_origin(value_type)
    if origin is not None and origin in table:
        return table[origin]
    raise SerdeError(f"no {kind} registered for {_type_name(value_type)}")


@dataclass
class Context:
    """Chooses a provider for each value type.

    Providers are looked up by the exact type first, then by the unparameterized
    origin of a generic type, so ``list`` covers ``list[int]`` unless
    ``list[int]`` has an entry of its own.
    """

    serializers: Mapping[Hashable, ValueSerializer] = field(default_factory=dict)
    deserializers: Mapping[Hashable, ValueDeserializer] = field(default_factory=dict)
    allocator: _Allocator | None = None

    def serializer_for(self, value_type: Any) -> ValueSerializer:
        """Return the serializer registered for ``value_type``."""
        return _lookup(self.serializers, value_type, "serializer")

    def deserializer_for(self, value_type: Any) -> ValueDeserializer:
        """Return the deserializer registered for ``value_type``."""
        return _lookup(self.deserializers, value_type, "deserializer")

    def serialize(self, value_type: Any, value: Any) -> Any:
        """Serialize ``value`` as a ``value_type``."""
        return self.serializer_for(value_type).serialize(self, value_type, value)

    def deserialize(self, value_type: Any, data: Any) -> Any:
        """Deserialize ``data`` into a ``value_type``."""
        return self.deserializer_for(value_type).deserialize(self, value_type, data)

    def alloc(self, value: Any) -> Any:
        """Hand ``value`` to the configured allocator and return what it keeps."""
        if self.allocator is None:
            raise SerdeError("no allocator configured")
        return self.allocator.alloc(self, value)


@dataclass(frozen=True)
class SerializeWithContext:
    """A value bound to the context and type it is serialized with."""

    context: Context
    value_type: Any
    value: Any

    def serialize(self) -> Any:
        """Serialize the bound value."""
        return self.context.serialize(self.value_type, self.value)


@dataclass(frozen=True)
class DeserializeWithContext:
    """A target type bound to the context it is deserialized with."""

    context: Context
    value_type: Any

    def deserialize(self, data: Any) -> Any:
        """Deserialize ``data`` into the bound type."""
        return self.context.deserialize(self.value_type, data)