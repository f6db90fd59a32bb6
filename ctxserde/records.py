"""Providers for records (dataclasses) and sequences."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, get_args, get_origin

from .components import (
    Context,
    SerdeError,
    ValueDeserializer,
    ValueSerializer,
    _type_name,
)


def _record_class(value_type: Any) -> type:
    cls = get_origin(value_type) or value_type
    if not (isinstance(cls, type) and dataclasses.is_dataclass(cls)):
        raise SerdeError(f"{_type_name(value_type)} is not a record type")
    return cls


@lru_cache(maxsize=None)
def _record_fields(cls: type) -> tuple[tuple[dataclasses.Field, Any], ...]:
    fields = []
    for record_field in dataclasses.fields(cls):
        field_type = record_field.type
        if isinstance(field_type, str):
            raise SerdeError(
                f"field {record_field.name} of {cls.__name__} has an unresolved "
                f"annotation: {field_type}"
            )
        fields.append((record_field, field_type))
    return tuple(fields)


def _has_default(record_field: dataclasses.Field) -> bool:
    return (
        record_field.default is not dataclasses.MISSING
        or record_field.default_factory is not dataclasses.MISSING
    )


def _item_type(explicit: Any, value_type: Any) -> Any:
    if explicit is not None:
        return explicit
    args = get_args(value_type)
    if not args:
        raise SerdeError(f"cannot tell the item type of {_type_name(value_type)}")
    return args[0]


class SerializeFields(ValueSerializer):
    """Serializes a dataclass as a map of its fields, in declaration order."""

    def serialize(self, context: Context, value_type: Any, value: Any) -> dict[str, Any]:
        cls = _record_class(value_type)
        return {
            record_field.name: context.serialize(field_type, getattr(value, record_field.name))
            for record_field, field_type in _record_fields(cls)
        }


class DeserializeRecordFields(ValueDeserializer):
    """Builds a dataclass from a map, ignoring unknown keys.

    A field given twice or missing without a default is an error.
    """

    def deserialize(self, context: Context, value_type: Any, data: Any) -> Any:
        cls = _record_class(value_type)
        items = getattr(data, "items", None)
        if not callable(items):
            raise SerdeError(f"invalid type: expected map, found {type(data).__name__}")

        fields = [
            (record_field, field_type)
            for record_field, field_type in _record_fields(cls)
            if record_field.init
        ]
        types_by_name = {record_field.name: field_type for record_field, field_type in fields}
        found: dict[str, Any] = {}
        for key, raw in items():
            if not isinstance(key, str):
                raise SerdeError(f"invalid type: map key must be a string, found {type(key).__name__}")
            if key not in types_by_name:
                continue
            value = context.deserialize(types_by_name[key], raw)
            if key in found:
                raise SerdeError(f"duplicate field: {key}")
            found[key] = value

        for record_field, _ in fields:
            if record_field.name not in found and not _has_default(record_field):
                raise SerdeError(f"missing field: {record_field.name}")
        return cls(**found)


@dataclass(frozen=True)
class SerializeIterator(ValueSerializer):
    """Serializes any iterable as a list; items use the type's first argument."""

    item_type: Any = None

    def serialize(self, context: Context, value_type: Any, value: Any) -> list[Any]:
        item_type = _item_type(self.item_type, value_type)
        try:
            items = iter(value)
        except TypeError:
            raise SerdeError(f"value of type {type(value).__name__} is not iterable") from None
        return [context.serialize(item_type, item) for item in items]


@dataclass(frozen=True)
class DeserializeExtend(ValueDeserializer):
    """Builds a collection from a sequence, deserializing each item in turn."""

    item_type: Any = None
    container: Any = None

    def deserialize(self, context: Context, value_type: Any, data: Any) -> Any:
        if not isinstance(data, (list, tuple)):
            raise SerdeError(f"invalid type: expected sequence, found {type(data).__name__}")
        item_type = _item_type(self.item_type, value_type)
        items = [context.deserialize(item_type, raw) for raw in data]
        factory = self.container or get_origin(value_type) or value_type
        return factory(items)