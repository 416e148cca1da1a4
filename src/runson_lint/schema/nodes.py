"""Immutable schema nodes. The compiled Schema Model is a tree of these."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import StrEnum


class ScalarKind(StrEnum):
    BOOL = "bool"
    INT = "int"
    STRING = "string"


@dataclass(frozen=True)
class ScalarSchema:
    """A scalar of one kind, optionally constrained.

    ``pattern`` applies to strings, ``minimum`` to ints, ``choices`` to strings.
    """

    kind: ScalarKind
    pattern: re.Pattern[str] | None = None
    minimum: int | None = None
    choices: tuple[str, ...] | None = None
    min_length: int | None = None


@dataclass(frozen=True)
class UnionSchema:
    """Matches if any alternative matches, tried in declared order."""

    alternatives: tuple[SchemaNode, ...]


@dataclass(frozen=True)
class FieldSpec:
    name: str
    schema: SchemaNode
    required: bool = False


@dataclass(frozen=True)
class StructSchema:
    """A mapping with declared fields. ``open`` structs tolerate unknown keys."""

    name: str
    fields: tuple[FieldSpec, ...] = ()
    open: bool = False
    _index: dict[str, FieldSpec] = field(default_factory=dict, compare=False, repr=False)

    def __post_init__(self) -> None:
        self._index.update({f.name: f for f in self.fields})

    def field_for(self, name: str) -> FieldSpec | None:
        return self._index.get(name)


@dataclass(frozen=True)
class ArraySchema:
    element: SchemaNode


@dataclass(frozen=True)
class MapOfSchema:
    """A mapping of arbitrary string keys to values of one schema."""

    value: SchemaNode


SchemaNode = ScalarSchema | UnionSchema | StructSchema | ArraySchema | MapOfSchema


def describe(node: SchemaNode) -> str:
    """Human-readable shape of a schema node, used in diagnostic messages."""
    match node:
        case ScalarSchema(choices=choices) if choices:
            return " | ".join(f'"{c}"' for c in choices)
        case ScalarSchema(kind=kind, minimum=minimum) if minimum is not None:
            return f"{kind} (>={minimum})"
        case ScalarSchema(kind=kind, pattern=pattern) if pattern is not None:
            return f"{kind} matching /{pattern.pattern}/"
        case ScalarSchema(kind=kind):
            return str(kind)
        case UnionSchema(alternatives=alternatives):
            return " | ".join(describe(a) for a in alternatives)
        case StructSchema(name=name):
            return name
        case ArraySchema(element=element):
            return f"[...{describe(element)}]"
        case MapOfSchema(value=value):
            return f"{{[string]: {describe(value)}}}"
    raise TypeError(f"Not a schema node: {type(node).__name__}")
