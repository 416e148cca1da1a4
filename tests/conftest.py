"""Shared test fixtures for the runs-on config linter."""

from __future__ import annotations

from pathlib import Path

import pytest

from runson_lint.models.errors import Diagnostic, Severity
from runson_lint.normalizer import Normalizer
from runson_lint.parser.loader import TrackedLoader
from runson_lint.schema.compiler import SchemaModel
from runson_lint.schema.registry import get_schema
from runson_lint.service.linter import ConfigLinter
from runson_lint.validator.structural import StructuralValidator

FIXTURES_DIR = Path(__file__).parent / "fixtures"
VALID_DIR = FIXTURES_DIR / "valid"
INVALID_DIR = FIXTURES_DIR / "invalid"


@pytest.fixture
def loader() -> TrackedLoader:
    return TrackedLoader()


@pytest.fixture(scope="session")
def schema() -> SchemaModel:
    return get_schema()


@pytest.fixture
def normalizer() -> Normalizer:
    return Normalizer()


@pytest.fixture
def validator(schema: SchemaModel) -> StructuralValidator:
    return StructuralValidator(schema)


@pytest.fixture
def linter(schema: SchemaModel) -> ConfigLinter:
    return ConfigLinter(schema=schema)


def errors_of(diagnostics: list[Diagnostic]) -> list[Diagnostic]:
    return [d for d in diagnostics if d.severity is Severity.ERROR]


def warnings_of(diagnostics: list[Diagnostic]) -> list[Diagnostic]:
    return [d for d in diagnostics if d.severity is Severity.WARNING]


SAMPLE_CONFIG_YAML = """\
_extends: .github-private

runners:
  test-runner:
    cpu: [2]
    ram: [16]
    family: [c7a]

images:
  test-image:
    ami: ami-1234567890abcdef0

pools:
  test-pool:
    name: test-pool
    runner: test-runner
    schedule:
      - name: default
        hot: 1
        stopped: 2

admins:
  - admin1
  - admin2
"""
