"""The fixed Schema Model for runs-on configuration files."""

from runson_lint.schema.compiler import SchemaCompiler, SchemaModel
from runson_lint.schema.nodes import (
    ArraySchema,
    FieldSpec,
    MapOfSchema,
    ScalarKind,
    ScalarSchema,
    SchemaNode,
    StructSchema,
    UnionSchema,
    describe,
)
from runson_lint.schema.registry import get_schema, reset_schema

__all__ = [
    "ArraySchema",
    "FieldSpec",
    "MapOfSchema",
    "ScalarKind",
    "ScalarSchema",
    "SchemaCompiler",
    "SchemaModel",
    "SchemaNode",
    "StructSchema",
    "UnionSchema",
    "describe",
    "get_schema",
    "reset_schema",
]
