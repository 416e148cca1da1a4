"""Structured diagnostics with YAML source position tracking, and the error taxonomy."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, computed_field


class Severity(StrEnum):
    ERROR = "error"
    WARNING = "warning"


class Diagnostic(BaseModel):
    """A single reported issue. ``line``/``column`` are 1-based; 0 means unknown."""

    model_config = ConfigDict(frozen=True)

    path: str
    message: str
    severity: Severity = Severity.ERROR
    line: int = 0
    column: int = 0
    source: str | None = None

    @property
    def is_error(self) -> bool:
        return self.severity is Severity.ERROR


class ValidationReport(BaseModel):
    """Result of validating one configuration document."""

    source: str
    diagnostics: list[Diagnostic] = []

    @computed_field  # type: ignore[prop-decorator]
    @property
    def valid(self) -> bool:
        """A document passes when no diagnostic carries ``Error`` severity."""
        return self.error_count == 0

    @property
    def errors(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.is_error]

    @property
    def warnings(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if not d.is_error]

    @property
    def error_count(self) -> int:
        return len(self.errors)

    @property
    def warning_count(self) -> int:
        return len(self.warnings)


class ConfigParseError(Exception):
    """Raised by the loader when the input is not well-formed YAML.

    ``line``/``column`` are 1-based, or 0 when the parser reported no position.
    """

    prefix = "YAML parse error"

    def __init__(self, message: str, line: int = 0, column: int = 0) -> None:
        self.line = line
        self.column = column
        super().__init__(message)

    def to_diagnostic(self, source: str | None = None) -> Diagnostic:
        return Diagnostic(
            path="",
            message=f"{self.prefix}: {self}",
            severity=Severity.ERROR,
            line=self.line,
            column=self.column,
            source=source,
        )


class YAMLSafetyError(ConfigParseError):
    """Raised when YAML input violates safety constraints.

    Distinct from parse errors: the input is well-formed but oversized, too deeply
    nested, or expands (through aliases) into too many nodes.
    """

    prefix = "YAML safety error"


class SchemaCompileError(Exception):
    """The schema definition could not be found or compiled. Fatal at startup."""

    def __init__(self, message: str, location: str | None = None) -> None:
        self.location = location
        if location:
            message = f"{location}: {message}"
        super().__init__(message)
