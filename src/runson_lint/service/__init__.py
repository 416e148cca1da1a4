"""Validation service layer, reusable by the CLI and by library callers."""

from runson_lint.service.linter import ConfigLinter

__all__ = ["ConfigLinter"]
