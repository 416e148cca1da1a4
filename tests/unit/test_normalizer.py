"""Tests for the spot canonicalization rule and the normalizer's walk."""

from __future__ import annotations

import pytest

from runson_lint.models.value import BoolValue, MappingValue, StringValue
from runson_lint.normalizer import NormalizationRule, Normalizer, bool_to_string
from runson_lint.parser.loader import TrackedLoader


class TestSpotCoercion:
    @pytest.mark.parametrize(("literal", "expected"), [("true", "true"), ("false", "false")])
    def test_boolean_becomes_string(
        self, loader: TrackedLoader, normalizer: Normalizer, literal: str, expected: str
    ) -> None:
        doc = loader.load_string(f"runners:\n  r:\n    spot: {literal}\n")
        spot = normalizer.normalize(doc.root).get("runners").get("r").get("spot")
        assert isinstance(spot, StringValue)
        assert spot.value == expected

    def test_position_preserved(self, loader: TrackedLoader, normalizer: Normalizer) -> None:
        doc = loader.load_string("runners:\n  r:\n    spot: false\n")
        before = doc.root.get("runners").get("r").get("spot")
        after = normalizer.normalize(doc.root).get("runners").get("r").get("spot")
        assert after.position == before.position

    def test_strings_untouched(self, loader: TrackedLoader, normalizer: Normalizer) -> None:
        doc = loader.load_string("runners:\n  r:\n    spot: pco\n")
        assert normalizer.normalize(doc.root) is doc.root

    def test_bool_to_string_ignores_other_values(self) -> None:
        value = StringValue(value="maybe")
        assert bool_to_string(value) is value


class TestWalkScope:
    def test_custom_top_level_fields_untouched(
        self, loader: TrackedLoader, normalizer: Normalizer
    ) -> None:
        doc = loader.load_string("x-runners:\n  r:\n    spot: true\nspot: false\n")
        normalized = normalizer.normalize(doc.root)
        assert normalized is doc.root
        assert isinstance(normalized.get("spot"), BoolValue)

    def test_other_runner_fields_untouched(
        self, loader: TrackedLoader, normalizer: Normalizer
    ) -> None:
        doc = loader.load_string("runners:\n  r:\n    ssh: true\n    spot: true\n")
        runner = normalizer.normalize(doc.root).get("runners").get("r")
        assert isinstance(runner.get("ssh"), BoolValue)
        assert isinstance(runner.get("spot"), StringValue)

    def test_pools_spot_not_rewritten(self, loader: TrackedLoader, normalizer: Normalizer) -> None:
        doc = loader.load_string("pools:\n  p:\n    spot: true\n")
        assert normalizer.normalize(doc.root) is doc.root

    def test_non_mapping_runners(self, loader: TrackedLoader, normalizer: Normalizer) -> None:
        doc = loader.load_string("runners: [a, b]\n")
        assert normalizer.normalize(doc.root) is doc.root

    def test_input_not_mutated(self, loader: TrackedLoader, normalizer: Normalizer) -> None:
        doc = loader.load_string("runners:\n  r:\n    spot: true\n")
        normalizer.normalize(doc.root)
        assert isinstance(doc.root.get("runners").get("r").get("spot"), BoolValue)

    def test_idempotent(self, loader: TrackedLoader, normalizer: Normalizer) -> None:
        doc = loader.load_string(
            "runners:\n  a:\n    spot: true\n  b:\n    spot: never\n  c:\n    spot: false\n"
        )
        once = normalizer.normalize(doc.root)
        twice = normalizer.normalize(once)
        assert twice == once

    def test_custom_rule_table(self, loader: TrackedLoader) -> None:
        rule = NormalizationRule(pattern=("pools", "*", "flag"), rewrite=bool_to_string)
        doc = loader.load_string("pools:\n  p:\n    flag: true\nrunners:\n  r:\n    spot: true\n")
        normalized = Normalizer([rule]).normalize(doc.root)
        assert isinstance(normalized, MappingValue)
        assert normalized.get("pools").get("p").get("flag").value == "true"
        assert isinstance(normalized.get("runners").get("r").get("spot"), BoolValue)
