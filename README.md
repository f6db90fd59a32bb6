# ctxserde

`ctxserde` separates *what* a value is from *how* it is written out. Instead of
each type deciding its own serialized form, an application **context** maps
every type to a provider, and the providers do the encoding. The same data can
then be written differently by two contexts: byte strings as hex in one and as
base64 in another, dates as RFC 3339 strings or as Unix timestamps.

The package has no runtime dependencies and needs Python 3.11 or later.

## Concepts

- `Context` (in `ctxserde.components`) is a dataclass holding two tables,
  `serializers` and `deserializers`, keyed by type, and an optional
  `allocator`. A type is looked up exactly first, then by its unparameterized
  origin, so an entry for `list` covers `list[int]` unless `list[int]` has an
  entry of its own.
  - `serialize(value_type, value)` turns a value into plain data (dicts, lists,
    strings, numbers, bytes).
  - `deserialize(value_type, data)` turns plain data back into a value.
  - `serializer_for(value_type)` and `deserializer_for(value_type)` return the
    registered provider.
  - `alloc(value)` hands the value to the configured allocator and returns what
    it gives back.

  A type with no provider, an unhashable type, a missing allocator, or bad input
  raises `SerdeError` (a subclass of `ValueError`).
- `ValueSerializer` and `ValueDeserializer` are the provider interfaces:
  `serialize(context, value_type, value)` and
  `deserialize(context, value_type, data)`. Providers call back into the
  context for the types they contain, so nested values use the context's
  choices all the way down.
- `SerializeWithContext(context, value_type, value)` and
  `DeserializeWithContext(context, value_type)` bind a context to a value or to
  a type; call `.serialize()` or `.deserialize(data)` on them.

## Providers

In `ctxserde.basic`:

- `UseSerde`: serializing converts the value to plain data (tuples and sets
  become lists, `bytearray` becomes `bytes`); deserializing checks the data
  against the type, including `list[...]`, `tuple[...]`, `set[...]`,
  `dict[...]`, unions and `None`, and widens an `int` to `float` where a float
  is expected. `bool` is not accepted for other number types.
- `SerializeString`: strings only, in both directions.
- `SerializeBytes`: bytes-like values as raw bytes; deserializing builds the
  target type from the bytes. `TryDeserializeBytes` does the same but turns a
  constructor's `ValueError`, `TypeError` or `ArithmeticError` into
  `SerdeError`.
- `SerializeDeref(unwrap=None, target_type=None)`: serializes the inner value of
  a wrapper, as `target_type` or else the wrapper type's first type argument.
- `SerializeWithDisplay`: serializes `str(value)` as a `str`.
- `DeserializeWithFromStr(parse=None)`: deserializes a `str` and parses it with
  `parse`, or with the target type itself.
- `SerializeFrom(other, to_other=None, from_other=None)`: serializes through
  another type, converting on the way out and back in. `TrySerializeFrom` takes
  the same arguments and turns conversion failures into `SerdeError`.
- `DeserializeDefault(provider, default=None)`: `None` data yields `default()`
  (or the type called with no arguments); anything else goes to `provider`.

In `ctxserde.records`:

- `SerializeFields`: a dataclass as a dict of its fields, in declaration order.
- `DeserializeRecordFields`: builds a dataclass from a map. Unknown keys are
  ignored; a field given twice (`duplicate field: ...`) or missing without a
  default (`missing field: ...`) is an error. Field annotations must be real
  types, not strings, so the record's module should not use
  `from __future__ import annotations`.
- `SerializeIterator(item_type=None)`: any iterable as a list.
- `DeserializeExtend(item_type=None, container=None)`: builds a collection from
  a list. The item type defaults to the first type argument and the container
  to the type's origin.

In `ctxserde.extra`:

- `SerializeHex`: bytes (or a `str`, taken as UTF-8) as lower-case hex text.
- `SerializeBase64`: bytes as padded standard base64; decoding is strict.
- `SerializeRfc3339Date`: a timezone-aware `datetime` as an RFC 3339 string in
  UTC, such as `2025-01-01T00:00:00+00:00`. Parsed dates come back in UTC.
- `SerializeTimestamp`: a timezone-aware `datetime` as whole seconds since the
  Unix epoch.

In `ctxserde.arena`:

- `Arena` keeps every value allocated into it: `alloc(value)`, `len()`, and
  iteration in allocation order.
- `AllocateWithArena(arena=None)`: an allocator for `Context.allocator` that
  stores into its own arena, or else into the context's `arena` attribute.
- `DeserializeAndAllocate(target_type=None)`: deserializes the referenced type
  (`target_type` or the first type argument) and returns it as stored by the
  context's allocator.

## JSON

`ctxserde.json_codec` provides three functions:

- `to_json_string(context, value_type, value)`: compact JSON, no spaces between
  tokens, non-ASCII text written as it is. Bytes are written as lists of
  integers; non-finite floats as `null`.
- `from_json_string(context, value_type, source)`
- `from_json_reader(context, value_type, reader)`: reads everything from an
  object with a `read()` method, text or UTF-8 bytes.

Input must be a single JSON document; trailing data, `NaN` and `Infinity` are
rejected with `SerdeError`. Repeated keys in an object are kept, so a record
field given twice is reported.

## Example

```python
from dataclasses import dataclass

from ctxserde.basic import SerializeString, UseSerde
from ctxserde.components import Context
from ctxserde.extra import SerializeHex
from ctxserde.json_codec import from_json_string, to_json_string
from ctxserde.records import DeserializeRecordFields, SerializeFields


@dataclass
class Payload:
    quantity: int
    message: str
    data: bytes


context = Context(
    serializers={
        int: UseSerde(),
        str: SerializeString(),
        bytes: SerializeHex(),
        Payload: SerializeFields(),
    },
    deserializers={
        int: UseSerde(),
        str: UseSerde(),
        bytes: SerializeHex(),
        Payload: DeserializeRecordFields(),
    },
)

value = Payload(quantity=42, message="hello", data=b"\x01\x02\x03")
text = to_json_string(context, Payload, value)
# {"quantity":42,"message":"hello","data":"010203"}
assert from_json_string(context, Payload, text) == value
```

## What it does not do

`ctxserde` is a library only: it has no command-line tool. JSON is the only
text format it reads and writes.