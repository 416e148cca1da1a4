"""Converts raw violations and deprecation hits into the final diagnostic list."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from runson_lint.models.errors import Diagnostic, Severity
from runson_lint.models.value import Position
from runson_lint.validator.deprecations import DeprecationHit
from runson_lint.validator.structural import Violation


class DiagnosticMapper:
    """Structural diagnostics first, then deprecation warnings.

    Each source keeps its own order. No sorting, no truncation; only exact
    duplicates are dropped.
    """

    def map(
        self,
        violations: Sequence[Violation],
        hits: Sequence[DeprecationHit],
        source: str | None = None,
    ) -> list[Diagnostic]:
        diagnostics = [self.from_violation(v, source) for v in violations]
        diagnostics.extend(self.from_hit(h, source) for h in hits)
        return deduplicate(diagnostics)

    @staticmethod
    def from_violation(violation: Violation, source: str | None = None) -> Diagnostic:
        line, column = _coords(violation.position)
        return Diagnostic(
            path=violation.path,
            message=violation.message,
            severity=Severity.ERROR,
            line=line,
            column=column,
            source=source,
        )

    @staticmethod
    def from_hit(hit: DeprecationHit, source: str | None = None) -> Diagnostic:
        line, column = _coords(hit.position)
        return Diagnostic(
            path=hit.path,
            message=(
                f'{hit.path}: field "{hit.field}" is deprecated, '
                f'use "{hit.replacement}" instead'
            ),
            severity=Severity.WARNING,
            line=line,
            column=column,
            source=source,
        )


def deduplicate(diagnostics: Iterable[Diagnostic]) -> list[Diagnostic]:
    seen: set[tuple[str, int, int, str, Severity]] = set()
    unique: list[Diagnostic] = []
    for diag in diagnostics:
        key = (diag.path, diag.line, diag.column, diag.message, diag.severity)
        if key in seen:
            continue
        seen.add(key)
        unique.append(diag)
    return unique


def _coords(position: Position | None) -> tuple[int, int]:
    return (position.line, position.column) if position else (0, 0)
