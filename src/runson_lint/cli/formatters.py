"""Renderers for validation reports: plain text, JSON and SARIF 2.1.0."""

from __future__ import annotations

import json
from typing import Any

from runson_lint.models.errors import Diagnostic, Severity, ValidationReport

TOOL_NAME = "runson-config-lint"
SARIF_SCHEMA = "https://json.schemastore.org/sarif-2.1.0.json"


def _location(report: ValidationReport, diag: Diagnostic) -> str:
    loc = report.source
    if diag.line > 0:
        loc = f"{loc}:{diag.line}:{diag.column}"
    return loc


def format_text(report: ValidationReport) -> str:
    """Errors first, then warnings, then a one-line summary."""
    if not report.diagnostics:
        return "✓ No issues found"

    lines: list[str] = []
    for title, group in (("error", report.errors), ("warning", report.warnings)):
        if not group:
            continue
        # errors open with a blank line; warnings get one only after errors
        if lines or title == "error":
            lines.append("")
        marker = "✗" if title == "error" else "⚠"
        lines.append(f"{marker} Found {len(group)} {title}(s):")
        lines.append("")
        for i, diag in enumerate(group, start=1):
            if i > 1:
                lines.append("")
            lines.append(f"  {i}. {_location(report, diag)}")
            lines.append(f"     {diag.message}")

    lines.append("")
    if report.error_count:
        summary = f"✗ Validation failed with {report.error_count} error(s)"
        if report.warning_count:
            summary += f" and {report.warning_count} warning(s)"
    else:
        summary = f"✓ Validation passed with {report.warning_count} warning(s)"
    lines.append(summary)
    return "\n".join(lines)


def format_json(report: ValidationReport) -> str:
    """``{"valid": bool, "diagnostics": [...]}``; unknown line/column are omitted."""
    diagnostics: list[dict[str, Any]] = []
    for diag in report.diagnostics:
        item: dict[str, Any] = {"path": diag.path}
        if diag.line:
            item["line"] = diag.line
        if diag.column:
            item["column"] = diag.column
        item["message"] = diag.message
        item["severity"] = diag.severity.value
        diagnostics.append(item)
    return json.dumps({"valid": report.valid, "diagnostics": diagnostics}, indent=2)


def format_sarif(report: ValidationReport, version: str) -> str:
    """Minimal SARIF log with one run and one result per diagnostic."""
    results: list[dict[str, Any]] = []
    for diag in report.diagnostics:
        physical: dict[str, Any] = {"artifactLocation": {"uri": report.source}}
        if diag.line > 0:
            physical["region"] = {"startLine": diag.line, "startColumn": max(diag.column, 1)}
        results.append(
            {
                "ruleId": (
                    "deprecated-field" if diag.severity is Severity.WARNING else "config-validation"
                ),
                "level": diag.severity.value,
                "message": {"text": diag.message},
                "locations": [{"physicalLocation": physical}],
            }
        )
    log = {
        "$schema": SARIF_SCHEMA,
        "version": "2.1.0",
        "runs": [
            {
                "tool": {"driver": {"name": TOOL_NAME, "version": version}},
                "results": results,
            }
        ],
    }
    return json.dumps(log, indent=2)


FORMATS = ("text", "json", "sarif")
