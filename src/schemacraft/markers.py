"""Composition markers usable as property types and in ``SchemaDefinition.compose``.

``AnyOf[Email, Phone]`` evaluates to a :class:`Composed` value carrying the
JSON Schema keyword and the member types, which the classifier turns into a
composition descriptor.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import ClassVar


class CompositionKind(StrEnum):
    """JSON Schema composition keyword."""

    ANY_OF = "anyOf"
    ALL_OF = "allOf"
    ONE_OF = "oneOf"


@dataclass(frozen=True, slots=True)
class Composed:
    """A composition of member types under one keyword."""

    kind: CompositionKind
    members: tuple[object, ...]

    def __repr__(self) -> str:
        names = ", ".join(getattr(member, "__name__", repr(member)) for member in self.members)
        return f"{_MARKER_NAMES[self.kind]}[{names}]"


class _CompositionMarker:
    kind: ClassVar[CompositionKind]

    def __init__(self) -> None:
        raise TypeError(f"{type(self).__name__} is used as {type(self).__name__}[...], not called")

    def __class_getitem__(cls, members: object) -> Composed:
        items = members if isinstance(members, tuple) else (members,)
        if not items:
            raise TypeError(f"{cls.__name__}[...] requires at least one member type")
        return Composed(kind=cls.kind, members=tuple(items))


class AnyOf(_CompositionMarker):
    kind = CompositionKind.ANY_OF


class AllOf(_CompositionMarker):
    kind = CompositionKind.ALL_OF


class OneOf(_CompositionMarker):
    kind = CompositionKind.ONE_OF


_MARKER_NAMES: dict[CompositionKind, str] = {
    CompositionKind.ANY_OF: "AnyOf",
    CompositionKind.ALL_OF: "AllOf",
    CompositionKind.ONE_OF: "OneOf",
}

__all__ = ["AllOf", "AnyOf", "Composed", "CompositionKind", "OneOf"]
