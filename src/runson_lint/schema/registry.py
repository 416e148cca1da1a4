"""Process-wide Schema Model: loaded and compiled once, then shared read-only."""

from __future__ import annotations

import logging
import threading
from importlib.resources import files
from pathlib import Path

from runson_lint.models.errors import SchemaCompileError
from runson_lint.schema.compiler import SchemaCompiler, SchemaModel
from runson_lint.settings import Settings

logger = logging.getLogger("runson_lint.schema")

SCHEMA_RESOURCE = "runs_on.yaml"

# Searched in order when the packaged schema is unavailable (source checkouts).
DEVELOPMENT_PATHS: tuple[Path, ...] = (
    Path("schema/runs_on.yaml"),
    Path("../../schema/runs_on.yaml"),
    Path("runs_on.yaml"),
)

_schema: SchemaModel | None = None
_lock = threading.Lock()


def get_schema(settings: Settings | None = None) -> SchemaModel:
    """Return the shared Schema Model, compiling it on first use.

    Raises ``SchemaCompileError`` if the schema cannot be read or compiled.
    """
    global _schema  # noqa: PLW0603
    if _schema is not None:
        return _schema
    with _lock:
        if _schema is None:
            _schema = load_schema(settings or Settings())
        return _schema


def reset_schema() -> None:
    """Drop the shared Schema Model (for tests)."""
    global _schema  # noqa: PLW0603
    with _lock:
        _schema = None


def load_schema(settings: Settings) -> SchemaModel:
    """Read and compile the schema without touching the shared instance."""
    text, location = read_schema_source(settings)
    logger.debug("Compiling schema from %s", location)
    return SchemaCompiler(location).compile(text)


def read_schema_source(settings: Settings) -> tuple[str, str]:
    """Return ``(schema_text, location)`` following the documented search order."""
    if settings.schema_path is not None:
        path = settings.schema_path
        try:
            return path.read_text(encoding="utf-8"), str(path)
        except OSError as exc:
            raise SchemaCompileError(f"failed to read schema file: {exc}", str(path)) from exc

    try:
        resource = files("runson_lint.schema").joinpath(SCHEMA_RESOURCE)
        return resource.read_text(encoding="utf-8"), f"runson_lint.schema/{SCHEMA_RESOURCE}"
    except OSError:
        logger.debug("Packaged schema unavailable, trying development paths")

    for candidate in DEVELOPMENT_PATHS:
        try:
            return candidate.read_text(encoding="utf-8"), str(candidate)
        except OSError:
            continue

    searched = ", ".join(str(p) for p in DEVELOPMENT_PATHS)
    raise SchemaCompileError(f"failed to read schema file (searched package data, {searched})")
