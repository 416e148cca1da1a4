"""Positional scan of the original document for retired field names."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from runson_lint.models.value import MappingValue, Position, Value
from runson_lint.validator.structural import join_path


@dataclass(frozen=True)
class DeprecationRule:
    """``field`` directly under any entry of the top-level ``section`` map."""

    section: str
    field: str
    replacement: str


@dataclass(frozen=True)
class DeprecationHit:
    path: str
    field: str
    replacement: str
    position: Position | None = None


DEFAULT_RULES: tuple[DeprecationRule, ...] = (
    DeprecationRule(section="runners", field="disk", replacement="volume"),
    DeprecationRule(section="pools", field="environment", replacement="env"),
)


class DeprecationScanner:
    """Finds deprecated keys. Runs on the non-normalized tree so positions are
    the user's own, and independently of whether the document is otherwise valid.
    """

    def __init__(self, rules: Sequence[DeprecationRule] = DEFAULT_RULES) -> None:
        self._rules = tuple(rules)

    def scan(self, root: Value) -> list[DeprecationHit]:
        if not isinstance(root, MappingValue):
            return []
        hits: list[DeprecationHit] = []
        for section in root.entries:
            rules = [r for r in self._rules if r.section == section.key]
            if not rules or not isinstance(section.value, MappingValue):
                continue
            for item in section.value.entries:
                if not isinstance(item.value, MappingValue):
                    continue
                item_path = join_path(section.key, item.key)
                for entry in item.value.entries:
                    for rule in rules:
                        if entry.key == rule.field:
                            hits.append(
                                DeprecationHit(
                                    path=join_path(item_path, entry.key),
                                    field=rule.field,
                                    replacement=rule.replacement,
                                    position=entry.key_position,
                                )
                            )
        return hits
