"""YAML parsing with line fidelity for runs-on configuration files."""

from runson_lint.parser.loader import TrackedLoader

__all__ = ["TrackedLoader"]
