"""Tests for the structural validator: scalars, unions, structs, arrays, maps."""

from __future__ import annotations

import pytest

from runson_lint.models.value import MappingValue, Position, StringValue
from runson_lint.normalizer import Normalizer
from runson_lint.parser.loader import TrackedLoader
from runson_lint.schema.compiler import SchemaModel
from runson_lint.schema.nodes import ScalarKind, ScalarSchema
from runson_lint.validator.structural import StructuralValidator, Violation, ViolationKind
from tests.conftest import SAMPLE_CONFIG_YAML


@pytest.fixture
def check(loader: TrackedLoader, normalizer: Normalizer, validator: StructuralValidator):
    def _check(yaml: str) -> list[Violation]:
        return validator.validate(normalizer.normalize(loader.load_string(yaml).root))

    return _check


class TestValidDocuments:
    def test_sample_config(self, check) -> None:
        assert check(SAMPLE_CONFIG_YAML) == []

    def test_empty_document(self, check) -> None:
        assert check("") == []

    def test_empty_mapping(self, check) -> None:
        assert check("{}") == []

    @pytest.mark.parametrize(
        "cpu",
        ["4", "[4]", "[2, 4]", '"4"', '"2+4"', "[\"2\", \"4\"]"],
    )
    def test_cpu_shapes(self, check, cpu: str) -> None:
        assert check(f"runners:\n  r:\n    cpu: {cpu}\n") == []

    @pytest.mark.parametrize("spot", ["false", '"false"', "true", "pco", "lowest-price", "never"])
    def test_spot_values(self, check, spot: str) -> None:
        assert check(f"runners:\n  r:\n    spot: {spot}\n") == []

    @pytest.mark.parametrize("value", ["true", "false", '"true"', '"false"'])
    def test_ssh_shapes(self, check, value: str) -> None:
        assert check(f"runners:\n  r:\n    ssh: {value}\n") == []

    def test_unknown_root_keys_accepted(self, check) -> None:
        assert check("x-anything: 1\ncustom:\n  nested: [1, 2]\n") == []


class TestScalars:
    def test_kind_mismatch(self, check) -> None:
        violations = check("runners:\n  r:\n    image: [a]\n")
        assert len(violations) == 1
        v = violations[0]
        assert v.kind is ViolationKind.TYPE_MISMATCH
        assert v.path == "runners.r.image"
        assert v.message == 'runners.r.image: expected string, got sequence ["a"]'
        assert v.position == Position(3, 12)

    def test_minimum(self, check) -> None:
        violations = check("images:\n  i:\n    main_disk_size: 0\n")
        assert [v.kind for v in violations] == [ViolationKind.CONSTRAINT]
        assert violations[0].message == "images.i.main_disk_size: invalid value 0 (must be >=1)"

    def test_pattern(self, check) -> None:
        violations = check("images:\n  i:\n    ami: not-an-ami\n")
        assert len(violations) == 1
        assert "must match /^ami-[0-9a-f]+$/" in violations[0].message

    def test_choices(self, check) -> None:
        violations = check("runners:\n  r:\n    spot: maybe\n")
        assert len(violations) == 1
        assert violations[0].path == "runners.r.spot"
        assert 'invalid value "maybe" (must be one of "false", "never"' in violations[0].message

    def test_empty_string(self, check) -> None:
        violations = check(
            'pools:\n  p:\n    runner: r\n    schedule:\n'
            '      - name: ""\n        hot: 1\n        stopped: 1\n'
        )
        assert len(violations) == 1
        assert violations[0].path == "pools.p.schedule[0].name"
        assert violations[0].message.endswith("(must not be empty)")

    def test_bool_is_not_int(self, check) -> None:
        violations = check(
            "pools:\n  p:\n    runner: r\n    max_surge: true\n"
        )
        assert len(violations) == 1
        assert violations[0].message == "pools.p.max_surge: expected int (>=0), got bool true"

    def test_float_is_not_int(self, check) -> None:
        violations = check("pools:\n  p:\n    runner: r\n    max_surge: 1.5\n")
        assert violations[0].kind is ViolationKind.TYPE_MISMATCH


class TestUnions:
    def test_single_violation_for_failed_union(self, check) -> None:
        violations = check("runners:\n  r:\n    cpu: {min: 2}\n")
        assert len(violations) == 1
        v = violations[0]
        assert v.kind is ViolationKind.NO_ALTERNATIVE
        assert v.message == (
            "runners.r.cpu: value {min} does not match any of: "
            "int | string | [...int] | [...string]"
        )

    def test_mixed_array_matches_no_alternative(self, check) -> None:
        violations = check("runners:\n  r:\n    cpu: [2, two]\n")
        assert len(violations) == 1
        assert violations[0].path == "runners.r.cpu"

    def test_bool_or_enum(self, check) -> None:
        violations = check("runners:\n  r:\n    private: sometimes\n")
        assert len(violations) == 1
        assert 'bool | "true" | "false" | "always"' in violations[0].message

    def test_first_alternative_wins(self, validator: StructuralValidator, schema: SchemaModel) -> None:
        cpu = schema.types["RunnerSpec"].field_for("cpu").schema
        assert validator.matches(StringValue(value="2+4"), cpu)
        assert not validator.matches(MappingValue(), cpu)


class TestStructs:
    def test_missing_required_reported_at_struct(self, check) -> None:
        violations = check("pools:\n  p:\n    name: p\n")
        assert len(violations) == 1
        v = violations[0]
        assert v.kind is ViolationKind.MISSING_FIELD
        assert v.path == "pools.p.runner"
        assert v.message == "pools.p.runner: field is required but missing"
        assert v.position == Position(3, 5)

    def test_missing_schedule_counts(self, check) -> None:
        violations = check("pools:\n  p:\n    runner: r\n    schedule:\n      - name: x\n")
        assert [v.path for v in violations] == [
            "pools.p.schedule[0].hot",
            "pools.p.schedule[0].stopped",
        ]

    def test_unknown_field_in_closed_struct(self, check) -> None:
        violations = check("runners:\n  r:\n    cpu: 2\n    gpu: 1\n")
        assert len(violations) == 1
        v = violations[0]
        assert v.kind is ViolationKind.UNKNOWN_FIELD
        assert v.path == "runners.r.gpu"
        assert 'unknown field "gpu"' in v.message
        assert v.position == Position(4, 5)

    @pytest.mark.parametrize(
        "yaml",
        [
            "images:\n  i:\n    colour: blue\n",
            "pools:\n  p:\n    runner: r\n    colour: blue\n",
            "pools:\n  p:\n    runner: r\n    schedule:\n"
            "      - {hot: 1, stopped: 1, colour: blue}\n",
        ],
    )
    def test_unknown_fields_everywhere_below_root(self, check, yaml: str) -> None:
        violations = check(yaml)
        assert [v.kind for v in violations] == [ViolationKind.UNKNOWN_FIELD]

    def test_struct_given_scalar(self, check) -> None:
        violations = check("runners:\n  r: big\n")
        assert violations[0].message == 'runners.r: expected RunnerSpec mapping, got string "big"'

    def test_root_not_a_mapping(self, check) -> None:
        violations = check("- a\n- b\n")
        assert len(violations) == 1
        assert violations[0].path == ""
        assert violations[0].message.startswith("<root>: expected Config mapping")

    def test_null_section(self, check) -> None:
        violations = check("runners:\n")
        assert violations[0].message == "runners: expected {[string]: RunnerSpec}, got null"


class TestTraversalOrder:
    def test_declaration_order_then_unknown(self, check) -> None:
        violations = check(
            "runners:\n  r:\n    zzz: 1\n    spot: maybe\n    cpu: {}\n"
        )
        assert [v.path for v in violations] == [
            "runners.r.cpu",
            "runners.r.spot",
            "runners.r.zzz",
        ]

    def test_map_entries_in_source_order(self, check) -> None:
        violations = check("runners:\n  b:\n    image: 1\n  a:\n    image: 2\n")
        assert [v.path for v in violations] == ["runners.b.image", "runners.a.image"]

    def test_all_violations_reported(self, check) -> None:
        violations = check(
            "pools:\n  p:\n    schedule:\n"
            "      - {name: x, hot: -5, stopped: -10}\n"
        )
        assert [v.path for v in violations] == [
            "pools.p.runner",
            "pools.p.schedule[0].hot",
            "pools.p.schedule[0].stopped",
        ]


def test_scalar_schema_defaults() -> None:
    node = ScalarSchema(kind=ScalarKind.INT)
    assert node.minimum is None and node.choices is None and node.pattern is None
