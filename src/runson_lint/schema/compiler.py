"""Compiles the YAML schema definition into an immutable tree of schema nodes."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from runson_lint.models.errors import SchemaCompileError
from runson_lint.schema.nodes import (
    ArraySchema,
    FieldSpec,
    MapOfSchema,
    ScalarKind,
    ScalarSchema,
    SchemaNode,
    StructSchema,
    UnionSchema,
)

_FORMS = ("scalar", "union", "array", "map_of", "struct")
_SCALAR_OPTIONS = {"pattern", "minimum", "choices", "min_length"}
_FIELD_OPTIONS = {"type", "required"}
_BUILTIN_KINDS = {kind.value for kind in ScalarKind}


@dataclass(frozen=True)
class SchemaModel:
    """The compiled schema: the root struct plus every named type."""

    root: StructSchema
    types: dict[str, SchemaNode] = field(default_factory=dict, compare=False)


class SchemaCompiler:
    """Compiles a schema definition document.

    Named types may reference each other in any order; reference cycles are
    rejected. Every problem raises :class:`SchemaCompileError`.
    """

    def __init__(self, location: str | None = None) -> None:
        self._location = location
        self._declared: dict[str, Any] = {}
        self._compiled: dict[str, SchemaNode] = {}
        self._resolving: list[str] = []

    def compile(self, text: str) -> SchemaModel:
        try:
            definition = YAML(typ="safe", pure=True).load(text)
        except YAMLError as exc:
            raise self._error(f"schema is not valid YAML: {exc}") from exc
        return self.compile_definition(definition)

    def compile_definition(self, definition: Any) -> SchemaModel:
        if not isinstance(definition, dict):
            raise self._error("schema definition must be a mapping")
        types = definition.get("types")
        if not isinstance(types, dict) or not types:
            raise self._error("schema definition must declare 'types'")
        root_name = definition.get("root")
        if not isinstance(root_name, str):
            raise self._error("schema definition must name a 'root' type")

        self._declared = types
        self._compiled = {}
        self._resolving = []
        for name in types:
            self._resolve(str(name))

        root = self._compiled.get(root_name)
        if root is None:
            raise self._error(f"root type '{root_name}' is not declared")
        if not isinstance(root, StructSchema):
            raise self._error(f"root type '{root_name}' must be a struct")
        return SchemaModel(root=root, types=dict(self._compiled))

    # -- named types ---------------------------------------------------------

    def _resolve(self, name: str) -> SchemaNode:
        compiled = self._compiled.get(name)
        if compiled is not None:
            return compiled
        if name in self._resolving:
            cycle = self._resolving[self._resolving.index(name) :] + [name]
            raise self._error(f"reference cycle: {' -> '.join(cycle)}")
        self._resolving.append(name)
        node = self._expr(self._declared[name], f"types.{name}", name)
        self._resolving.pop()
        self._compiled[name] = node
        return node

    # -- type expressions ----------------------------------------------------

    def _expr(self, expr: Any, where: str, name: str | None = None) -> SchemaNode:
        if isinstance(expr, str):
            if expr in _BUILTIN_KINDS:
                return ScalarSchema(kind=ScalarKind(expr))
            if expr in self._declared:
                return self._resolve(expr)
            raise self._error(f"{where}: unknown type '{expr}'")

        if not isinstance(expr, dict):
            raise self._error(f"{where}: type expression must be a name or a mapping")
        forms = [key for key in expr if key in _FORMS]
        if len(forms) != 1:
            raise self._error(f"{where}: expected exactly one of {', '.join(_FORMS)}")
        form = forms[0]
        allowed = _SCALAR_OPTIONS if form == "scalar" else set()
        unexpected = sorted(set(expr) - {form} - allowed)
        if unexpected:
            raise self._error(f"{where}: unexpected keys {unexpected}")

        body = expr[form]
        match form:
            case "scalar":
                return self._scalar(body, expr, where)
            case "union":
                if not isinstance(body, list) or not body:
                    raise self._error(f"{where}: union needs a non-empty list of alternatives")
                return UnionSchema(
                    alternatives=tuple(
                        self._expr(alt, f"{where}.union[{i}]") for i, alt in enumerate(body)
                    )
                )
            case "array":
                return ArraySchema(element=self._expr(body, f"{where}.array"))
            case "map_of":
                return MapOfSchema(value=self._expr(body, f"{where}.map_of"))
            case _:
                return self._struct(body, where, name or where)

    def _scalar(self, kind: Any, expr: dict[str, Any], where: str) -> ScalarSchema:
        try:
            scalar_kind = ScalarKind(kind)
        except ValueError:
            raise self._error(f"{where}: unknown scalar kind '{kind}'") from None

        pattern = None
        if "pattern" in expr:
            if scalar_kind is not ScalarKind.STRING:
                raise self._error(f"{where}: 'pattern' applies to strings only")
            try:
                pattern = re.compile(str(expr["pattern"]))
            except re.error as exc:
                raise self._error(f"{where}: invalid pattern: {exc}") from exc

        minimum = expr.get("minimum")
        if minimum is not None and (
            scalar_kind is not ScalarKind.INT or not isinstance(minimum, int)
        ):
            raise self._error(f"{where}: 'minimum' must be an int on an int scalar")

        choices = expr.get("choices")
        if choices is not None:
            if scalar_kind is not ScalarKind.STRING or not isinstance(choices, list) or not choices:
                raise self._error(f"{where}: 'choices' must be a non-empty list on a string scalar")
            choices = tuple(str(c) for c in choices)

        min_length = expr.get("min_length")
        if min_length is not None and (
            scalar_kind is not ScalarKind.STRING or not isinstance(min_length, int)
        ):
            raise self._error(f"{where}: 'min_length' must be an int on a string scalar")

        return ScalarSchema(
            kind=scalar_kind,
            pattern=pattern,
            minimum=minimum,
            choices=choices,
            min_length=min_length,
        )

    def _struct(self, body: Any, where: str, name: str) -> StructSchema:
        if not isinstance(body, dict):
            raise self._error(f"{where}: struct body must be a mapping")
        unexpected = sorted(set(body) - {"open", "fields"})
        if unexpected:
            raise self._error(f"{where}: unexpected keys {unexpected}")
        is_open = body.get("open", False)
        if not isinstance(is_open, bool):
            raise self._error(f"{where}: 'open' must be a boolean")
        raw_fields = body.get("fields") or {}
        if not isinstance(raw_fields, dict):
            raise self._error(f"{where}: 'fields' must be a mapping")

        fields: list[FieldSpec] = []
        for field_name, spec in raw_fields.items():
            field_where = f"{where}.{field_name}"
            if isinstance(spec, dict) and "type" in spec:
                unexpected = sorted(set(spec) - _FIELD_OPTIONS)
                if unexpected:
                    raise self._error(f"{field_where}: unexpected keys {unexpected}")
                required = spec.get("required", False)
                if not isinstance(required, bool):
                    raise self._error(f"{field_where}: 'required' must be a boolean")
                schema = self._expr(spec["type"], field_where)
            else:
                required = False
                schema = self._expr(spec, field_where)
            fields.append(FieldSpec(name=str(field_name), schema=schema, required=required))

        return StructSchema(name=name, fields=tuple(fields), open=is_open)

    def _error(self, message: str) -> SchemaCompileError:
        return SchemaCompileError(message, self._location)
