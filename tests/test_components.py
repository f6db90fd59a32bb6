import pytest

from ctxserde.components import (
    Context,
    DeserializeWithContext,
    SerdeError,
    SerializeWithContext,
    ValueDeserializer,
    ValueSerializer,
)


class Echo(ValueSerializer, ValueDeserializer):
    def __init__(self, tag):
        self.tag = tag

    def serialize(self, context, value_type, value):
        return (self.tag, value_type, value)

    def deserialize(self, context, value_type, data):
        return (self.tag, value_type, data)


class ListAllocator:
    def __init__(self):
        self.kept = []

    def alloc(self, context, value):
        self.kept.append(value)
        return value


def test_serialize_dispatches_on_type():
    context = Context(serializers={int: Echo("int"), str: Echo("str")})
    assert context.serialize(int, 5) == ("int", int, 5)
    assert context.serialize(str, "a") == ("str", str, "a")


def test_deserialize_dispatches_on_type():
    context = Context(deserializers={int: Echo("int")})
    assert context.deserialize(int, 9) == ("int", int, 9)


def test_missing_serializer_raises():
    context = Context()
    with pytest.raises(SerdeError, match="no serializer"):
        context.serialize(int, 1)


def test_missing_deserializer_raises_value_error():
    context = Context(serializers={int: Echo("int")})
    with pytest.raises(ValueError):
        context.deserialize(int, 1)


def test_generic_falls_back_to_origin():
    provider = Echo("list")
    context = Context(serializers={list: provider})
    assert context.serializer_for(list[int]) is provider
    assert context.serialize(list[int], [1]) == ("list", list[int], [1])


def test_exact_entry_wins_over_origin():
    exact = Echo("exact")
    context = Context(serializers={list: Echo("origin"), list[int]: exact})
    assert context.serializer_for(list[int]) is exact


def test_unhashable_type_raises():
    context = Context()
    with pytest.raises(SerdeError):
        context.deserializer_for([])


def test_alloc_without_allocator_raises():
    with pytest.raises(SerdeError, match="allocator"):
        Context().alloc(3)


def test_alloc_uses_allocator():
    allocator = ListAllocator()
    context = Context(allocator=allocator)
    item = object()
    assert context.alloc(item) is item
    assert allocator.kept == [item]


def test_serialize_with_context():
    context = Context(serializers={int: Echo("int")})
    bound = SerializeWithContext(context, int, 4)
    assert bound.serialize() == ("int", int, 4)


def test_deserialize_with_context():
    context = Context(deserializers={str: Echo("str")})
    bound = DeserializeWithContext(context, str)
    assert bound.deserialize("x") == ("str", str, "x")


def test_provider_interfaces_are_abstract():
    with pytest.raises(TypeError):
        ValueSerializer()
    with pytest.raises(TypeError):
        ValueDeserializer()