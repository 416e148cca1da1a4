"""Position-aware document tree produced by the loader. Immutable once built."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import StrEnum


class ValueKind(StrEnum):
    NULL = "null"
    BOOL = "bool"
    INT = "int"
    FLOAT = "float"
    STRING = "string"
    SEQUENCE = "sequence"
    MAPPING = "mapping"


@dataclass(frozen=True)
class Position:
    """1-based line/column of a source token."""

    line: int
    column: int


@dataclass(frozen=True)
class NullValue:
    position: Position | None = None

    kind = ValueKind.NULL


@dataclass(frozen=True)
class BoolValue:
    value: bool
    position: Position | None = None

    kind = ValueKind.BOOL


@dataclass(frozen=True)
class IntValue:
    value: int
    position: Position | None = None

    kind = ValueKind.INT


@dataclass(frozen=True)
class FloatValue:
    value: float
    position: Position | None = None

    kind = ValueKind.FLOAT


@dataclass(frozen=True)
class StringValue:
    value: str
    position: Position | None = None

    kind = ValueKind.STRING


@dataclass(frozen=True)
class SequenceValue:
    items: tuple[Value, ...] = ()
    position: Position | None = None

    kind = ValueKind.SEQUENCE


@dataclass(frozen=True)
class MappingEntry:
    """A key/value pair; ``key_position`` points at the key token itself."""

    key: str
    value: Value
    key_position: Position | None = None


@dataclass(frozen=True)
class MappingValue:
    entries: tuple[MappingEntry, ...] = ()
    position: Position | None = None

    kind = ValueKind.MAPPING

    def get(self, key: str) -> Value | None:
        for entry in self.entries:
            if entry.key == key:
                return entry.value
        return None

    def entry(self, key: str) -> MappingEntry | None:
        for entry in self.entries:
            if entry.key == key:
                return entry
        return None

    def keys(self) -> list[str]:
        return [entry.key for entry in self.entries]

    def __contains__(self, key: object) -> bool:
        return any(entry.key == key for entry in self.entries)

    def with_entries(self, entries: tuple[MappingEntry, ...]) -> MappingValue:
        return replace(self, entries=entries)


Value = (
    NullValue
    | BoolValue
    | IntValue
    | FloatValue
    | StringValue
    | SequenceValue
    | MappingValue
)


@dataclass(frozen=True)
class Document:
    """A parsed document: its root value plus the display name of its source."""

    root: Value
    source: str = "<string>"


def render_literal(value: Value) -> str:
    """Short source-like rendering of a value for use in messages."""
    match value:
        case NullValue():
            return "null"
        case BoolValue(value=v):
            return "true" if v else "false"
        case IntValue(value=v) | FloatValue(value=v):
            return repr(v)
        case StringValue(value=v):
            text = v if len(v) <= 60 else v[:57] + "..."
            return f'"{text}"'
        case SequenceValue(items=items):
            shown = ", ".join(render_literal(i) for i in items[:5])
            return f"[{shown}, ...]" if len(items) > 5 else f"[{shown}]"
        case MappingValue(entries=entries):
            shown = ", ".join(e.key for e in entries[:5])
            return f"{{{shown}, ...}}" if len(entries) > 5 else f"{{{shown}}}"
    raise TypeError(f"Not a Value node: {type(value).__name__}")
