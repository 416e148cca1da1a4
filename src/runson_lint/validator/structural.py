"""Structural validation: matches a normalized value tree against the Schema Model."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from runson_lint.models.value import (
    BoolValue,
    IntValue,
    MappingValue,
    NullValue,
    Position,
    SequenceValue,
    StringValue,
    Value,
    render_literal,
)
from runson_lint.schema.compiler import SchemaModel
from runson_lint.schema.nodes import (
    ArraySchema,
    MapOfSchema,
    ScalarKind,
    ScalarSchema,
    SchemaNode,
    StructSchema,
    UnionSchema,
    describe,
)

_KIND_TYPES: dict[ScalarKind, type] = {
    ScalarKind.BOOL: BoolValue,
    ScalarKind.INT: IntValue,
    ScalarKind.STRING: StringValue,
}


class ViolationKind(StrEnum):
    TYPE_MISMATCH = "type_mismatch"
    CONSTRAINT = "constraint"
    NO_ALTERNATIVE = "no_alternative"
    MISSING_FIELD = "missing_field"
    UNKNOWN_FIELD = "unknown_field"


@dataclass(frozen=True)
class Violation:
    """A raw structural failure, before it is mapped to a diagnostic."""

    kind: ViolationKind
    path: str
    message: str
    position: Position | None = None


def join_path(path: str, key: str) -> str:
    return f"{path}.{key}" if path else key


def _label(path: str) -> str:
    return path or "<root>"


class StructuralValidator:
    """Recursive matcher over Scalar/Union/Struct/Array/MapOf schema nodes.

    A single pass reports type and constraint violations, unknown keys in closed
    structs, and missing required fields. Violations come out in traversal order:
    struct fields in schema declaration order (then unknown keys in source order),
    array elements by index, map entries in source order.
    """

    def __init__(self, schema: SchemaModel) -> None:
        self._schema = schema

    def validate(self, root: Value) -> list[Violation]:
        # An empty document is an empty configuration.
        if isinstance(root, NullValue):
            root = MappingValue(position=root.position)
        violations: list[Violation] = []
        self._check(root, self._schema.root, "", violations)
        return violations

    def matches(self, value: Value, schema: SchemaNode) -> bool:
        scratch: list[Violation] = []
        self._check(value, schema, "", scratch)
        return not scratch

    def _check(self, value: Value, schema: SchemaNode, path: str, out: list[Violation]) -> None:
        match schema:
            case ScalarSchema():
                self._check_scalar(value, schema, path, out)
            case UnionSchema(alternatives=alternatives):
                if not any(self.matches(value, alt) for alt in alternatives):
                    out.append(
                        Violation(
                            kind=ViolationKind.NO_ALTERNATIVE,
                            path=path,
                            message=(
                                f"{_label(path)}: value {render_literal(value)} "
                                f"does not match any of: {describe(schema)}"
                            ),
                            position=value.position,
                        )
                    )
            case StructSchema():
                self._check_struct(value, schema, path, out)
            case ArraySchema(element=element):
                if not isinstance(value, SequenceValue):
                    out.append(_mismatch(value, schema, path))
                    return
                for index, item in enumerate(value.items):
                    self._check(item, element, f"{path}[{index}]", out)
            case MapOfSchema(value=value_schema):
                if not isinstance(value, MappingValue):
                    out.append(_mismatch(value, schema, path))
                    return
                for entry in value.entries:
                    self._check(entry.value, value_schema, join_path(path, entry.key), out)

    def _check_scalar(
        self, value: Value, schema: ScalarSchema, path: str, out: list[Violation]
    ) -> None:
        if not isinstance(value, _KIND_TYPES[schema.kind]):
            out.append(_mismatch(value, schema, path))
            return

        requirement: str | None = None
        match value:
            case IntValue(value=number) if schema.minimum is not None and number < schema.minimum:
                requirement = f"must be >={schema.minimum}"
            case StringValue(value=text) if schema.choices and text not in schema.choices:
                requirement = "must be one of " + ", ".join(f'"{c}"' for c in schema.choices)
            case StringValue(value=text) if schema.pattern and not schema.pattern.search(text):
                requirement = f"must match /{schema.pattern.pattern}/"
            case StringValue(value=text) if schema.min_length and len(text) < schema.min_length:
                requirement = (
                    "must not be empty"
                    if schema.min_length == 1
                    else f"must be at least {schema.min_length} characters"
                )
        if requirement is not None:
            out.append(
                Violation(
                    kind=ViolationKind.CONSTRAINT,
                    path=path,
                    message=f"{_label(path)}: invalid value {render_literal(value)} ({requirement})",
                    position=value.position,
                )
            )

    def _check_struct(
        self, value: Value, schema: StructSchema, path: str, out: list[Violation]
    ) -> None:
        if not isinstance(value, MappingValue):
            out.append(_mismatch(value, schema, path, f"{schema.name} mapping"))
            return

        for spec in schema.fields:
            field_path = join_path(path, spec.name)
            entry = value.entry(spec.name)
            if entry is not None:
                self._check(entry.value, spec.schema, field_path, out)
            elif spec.required:
                out.append(
                    Violation(
                        kind=ViolationKind.MISSING_FIELD,
                        path=field_path,
                        message=f"{field_path}: field is required but missing",
                        position=value.position,
                    )
                )

        if schema.open:
            return
        for entry in value.entries:
            if schema.field_for(entry.key) is None:
                field_path = join_path(path, entry.key)
                out.append(
                    Violation(
                        kind=ViolationKind.UNKNOWN_FIELD,
                        path=field_path,
                        message=(
                            f'{field_path}: field not allowed (unknown field "{entry.key}" '
                            f"in {schema.name})"
                        ),
                        position=entry.key_position or value.position,
                    )
                )


def _mismatch(
    value: Value, schema: SchemaNode, path: str, expected: str | None = None
) -> Violation:
    got = "null" if isinstance(value, NullValue) else f"{value.kind} {render_literal(value)}"
    return Violation(
        kind=ViolationKind.TYPE_MISMATCH,
        path=path,
        message=(
            f"{_label(path)}: expected {expected or describe(schema)}, "
            f"got {got}"
        ),
        position=value.position,
    )
