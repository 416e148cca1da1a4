"""Domain models: the position-aware value tree and diagnostics."""

from runson_lint.models.errors import (
    ConfigParseError,
    Diagnostic,
    SchemaCompileError,
    Severity,
    ValidationReport,
    YAMLSafetyError,
)
from runson_lint.models.value import (
    BoolValue,
    Document,
    FloatValue,
    IntValue,
    MappingEntry,
    MappingValue,
    NullValue,
    Position,
    SequenceValue,
    StringValue,
    Value,
    ValueKind,
)

__all__ = [
    "BoolValue",
    "ConfigParseError",
    "Diagnostic",
    "Document",
    "FloatValue",
    "IntValue",
    "MappingEntry",
    "MappingValue",
    "NullValue",
    "Position",
    "SchemaCompileError",
    "SequenceValue",
    "Severity",
    "StringValue",
    "ValidationReport",
    "Value",
    "ValueKind",
    "YAMLSafetyError",
]
