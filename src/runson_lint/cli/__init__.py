"""Command-line entry point: ``runson-config-lint [--format F] [--stdin] [file]``."""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence

from runson_lint import __version__
from runson_lint.cli.formatters import FORMATS, TOOL_NAME, format_json, format_sarif, format_text
from runson_lint.models.errors import SchemaCompileError, ValidationReport
from runson_lint.service.linter import ConfigLinter
from runson_lint.settings import Settings

logger = logging.getLogger("runson_lint.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=TOOL_NAME, description="Validate a runs-on.yml configuration file"
    )
    parser.add_argument("file", nargs="?", help="Configuration file to validate")
    parser.add_argument("--format", choices=FORMATS, default="text", help="Output format")
    parser.add_argument("--stdin", action="store_true", help="Read from stdin instead of file")
    parser.add_argument(
        "--version", action="version", version=f"{TOOL_NAME} v{__version__}"
    )
    return parser


def render(report: ValidationReport, fmt: str) -> str:
    if fmt == "json":
        return format_json(report)
    if fmt == "sarif":
        return format_sarif(report, __version__)
    return format_text(report)


def main(argv: Sequence[str] | None = None) -> int:
    """Run the linter. Returns 0 when no error diagnostic was reported, else 1."""
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.stdin and not args.file:
        parser.error("no file specified")

    settings = Settings()
    logging.basicConfig(level=settings.log_level.upper())

    try:
        linter = ConfigLinter()
        if args.stdin:
            report = linter.validate_stream(sys.stdin.buffer, "<stdin>")
        else:
            report = linter.validate_file(args.file)
    except (OSError, SchemaCompileError) as exc:
        logger.debug("Validation aborted", exc_info=True)
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    print(render(report, args.format))
    return 0 if report.valid else 1


if __name__ == "__main__":
    sys.exit(main())
