"""Validator for runs-on.yml configuration files."""

from runson_lint.models.errors import Diagnostic, SchemaCompileError, Severity, ValidationReport
from runson_lint.service.linter import ConfigLinter

__version__ = "0.1.0"

__all__ = [
    "ConfigLinter",
    "Diagnostic",
    "SchemaCompileError",
    "Severity",
    "ValidationReport",
    "__version__",
]
