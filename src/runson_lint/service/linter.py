"""The validation pipeline: parse → normalize → validate → scan → map."""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path
from typing import IO

from runson_lint.models.errors import ConfigParseError, ValidationReport
from runson_lint.models.value import Document
from runson_lint.normalizer import Normalizer
from runson_lint.parser.loader import TrackedLoader
from runson_lint.schema.compiler import SchemaModel
from runson_lint.schema.registry import get_schema
from runson_lint.validator.deprecations import DeprecationScanner
from runson_lint.validator.mapper import DiagnosticMapper
from runson_lint.validator.structural import StructuralValidator

logger = logging.getLogger("runson_lint.service")


class ConfigLinter:
    """Validates runs-on configuration documents.

    Construction resolves the shared Schema Model and raises
    ``SchemaCompileError`` if it cannot be built. After that every call is
    independent and side-effect free, so one instance may serve many threads.
    Per-document problems are returned as diagnostics; only I/O failures while
    reading the input propagate as exceptions.
    """

    def __init__(
        self,
        schema: SchemaModel | None = None,
        loader: TrackedLoader | None = None,
    ) -> None:
        self._schema = schema or get_schema()
        self._loader = loader or TrackedLoader()
        self._normalizer = Normalizer()
        self._validator = StructuralValidator(self._schema)
        self._scanner = DeprecationScanner()
        self._mapper = DiagnosticMapper()

    # -- public API ----------------------------------------------------------

    def validate_string(self, content: str, source: str = "<string>") -> ValidationReport:
        """Validate YAML text."""
        return self._run(lambda: self._loader.load_string(content, source), source)

    def validate_file(self, path: Path | str) -> ValidationReport:
        """Validate a file on disk. Raises ``OSError`` if it cannot be read."""
        path = Path(path)
        return self._run(lambda: self._loader.load(path), str(path))

    def validate_stream(
        self, stream: IO[str] | IO[bytes], source: str = "<stdin>"
    ) -> ValidationReport:
        """Validate the remaining content of an open stream."""
        return self._run(lambda: self._loader.load_stream(stream, source), source)

    def validate_document(self, document: Document) -> ValidationReport:
        """Validate an already-parsed document."""
        normalized = self._normalizer.normalize(document.root)
        violations = self._validator.validate(normalized)
        hits = self._scanner.scan(document.root)
        diagnostics = self._mapper.map(violations, hits, document.source)
        report = ValidationReport(source=document.source, diagnostics=diagnostics)
        logger.debug(
            "Validated %s: %d error(s), %d warning(s)",
            document.source,
            report.error_count,
            report.warning_count,
        )
        return report

    # -- helpers -------------------------------------------------------------

    def _run(self, load: Callable[[], Document], source: str) -> ValidationReport:
        try:
            document = load()
        except ConfigParseError as exc:
            logger.debug("Could not parse %s: %s", source, exc)
            return ValidationReport(source=source, diagnostics=[exc.to_diagnostic(source)])
        return self.validate_document(document)
