"""Canonicalizes polymorphic field representations before structural matching.

Rules are keyed by a path pattern (``*`` matches any mapping key). The walk only
descends along prefixes of some rule's pattern, so custom top-level fields and
every other subtree pass through untouched. Fields whose shapes the schema
already expresses as a union (``cpu: 4``, ``cpu: "2+4"``, ``cpu: [4]``) need no
rewrite and have no rule here.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass

from runson_lint.models.value import BoolValue, MappingEntry, MappingValue, StringValue, Value

WILDCARD = "*"


@dataclass(frozen=True)
class NormalizationRule:
    pattern: tuple[str, ...]
    rewrite: Callable[[Value], Value]

    def matches(self, path: tuple[str, ...]) -> bool:
        return len(path) == len(self.pattern) and _match_prefix(self.pattern, path)

    def descends_through(self, path: tuple[str, ...]) -> bool:
        return len(path) < len(self.pattern) and _match_prefix(self.pattern, path)


def _match_prefix(pattern: tuple[str, ...], path: tuple[str, ...]) -> bool:
    return all(p == WILDCARD or p == key for p, key in zip(pattern, path))


def bool_to_string(value: Value) -> Value:
    """``true``/``false`` literals become the strings ``"true"``/``"false"``."""
    match value:
        case BoolValue(value=flag, position=position):
            return StringValue(value="true" if flag else "false", position=position)
    return value


DEFAULT_RULES: tuple[NormalizationRule, ...] = (
    # spot is a closed string enum that must still accept YAML booleans
    NormalizationRule(pattern=("runners", WILDCARD, "spot"), rewrite=bool_to_string),
)


class Normalizer:
    """Produces a canonicalized copy of a document tree. Never mutates its input."""

    def __init__(self, rules: Sequence[NormalizationRule] = DEFAULT_RULES) -> None:
        self._rules = tuple(rules)

    def normalize(self, root: Value) -> Value:
        return self._walk(root, ())

    def _walk(self, value: Value, path: tuple[str, ...]) -> Value:
        if not isinstance(value, MappingValue):
            return value
        entries: list[MappingEntry] = []
        changed = False
        for entry in value.entries:
            new_value = self._visit(entry.value, path + (entry.key,))
            if new_value is not entry.value:
                changed = True
                entry = MappingEntry(
                    key=entry.key, value=new_value, key_position=entry.key_position
                )
            entries.append(entry)
        return value.with_entries(tuple(entries)) if changed else value

    def _visit(self, value: Value, path: tuple[str, ...]) -> Value:
        for rule in self._rules:
            if rule.matches(path):
                value = rule.rewrite(value)
        if any(rule.descends_through(path) for rule in self._rules):
            value = self._walk(value, path)
        return value
