"""Deserializing values into an arena that keeps them alive."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any, get_args

from .components import Context, SerdeError, ValueDeserializer, _type_name


class Arena:
    """Owns every value allocated into it, in allocation order."""

    def __init__(self) -> None:
        self._values: list[Any] = []

    def alloc(self, value: Any) -> Any:
        """Store ``value`` and return it."""
        self._values.append(value)
        return value

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[Any]:
        return iter(self._values)


@dataclass
class AllocateWithArena:
    """Allocates into ``arena``, or into the context's own ``arena`` attribute."""

    arena: Arena | None = None

    def alloc(self, context: Context, value: Any) -> Any:
        arena = self.arena if self.arena is not None else getattr(context, "arena", None)
        if arena is None:
            raise SerdeError("context has no arena")
        return arena.alloc(value)


@dataclass(frozen=True)
class DeserializeAndAllocate(ValueDeserializer):
    """Deserializes the referenced type and hands the result to the context's allocator.

    The referenced type is ``target_type`` or else the first type argument.
    """

    target_type: Any = None

    def deserialize(self, context: Context, value_type: Any, data: Any) -> Any:
        target = self.target_type
        if target is None:
            args = get_args(value_type)
            if not args:
                raise SerdeError(
                    f"cannot tell what {_type_name(value_type)} refers to"
                )
            target = args[0]
        return context.alloc(context.deserialize(target, data))