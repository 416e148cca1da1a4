"""Structural validation, deprecation scanning and diagnostic mapping."""

from runson_lint.validator.deprecations import DeprecationHit, DeprecationRule, DeprecationScanner
from runson_lint.validator.mapper import DiagnosticMapper, deduplicate
from runson_lint.validator.structural import StructuralValidator, Violation, ViolationKind

__all__ = [
    "DeprecationHit",
    "DeprecationRule",
    "DeprecationScanner",
    "DiagnosticMapper",
    "StructuralValidator",
    "Violation",
    "ViolationKind",
    "deduplicate",
]
