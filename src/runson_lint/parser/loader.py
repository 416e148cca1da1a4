"""YAML loader that builds a position-aware value tree for error reporting."""

from __future__ import annotations

import datetime
from pathlib import Path
from typing import IO, Any

from ruamel.yaml import YAML
from ruamel.yaml.error import MarkedYAMLError, YAMLError
from ruamel.yaml.scalarbool import ScalarBoolean

from runson_lint.models.errors import ConfigParseError, YAMLSafetyError
from runson_lint.models.value import (
    BoolValue,
    Document,
    FloatValue,
    IntValue,
    MappingEntry,
    MappingValue,
    NullValue,
    Position,
    SequenceValue,
    StringValue,
    Value,
)
from runson_lint.settings import Settings


class TrackedLoader:
    """YAML loader that tracks source positions for error reporting.

    Uses ruamel.yaml's round-trip loader, which preserves line/column info on
    every parsed collection. Aliases and ``<<`` merge keys are resolved by the
    parser; the conversion below copies each occurrence into its own subtree,
    so the resulting tree never shares nodes.
    """

    def __init__(
        self,
        max_document_size: int | None = None,
        max_node_count: int | None = None,
        max_depth: int | None = None,
    ) -> None:
        settings = Settings()
        self._max_document_size = max_document_size or settings.max_document_size
        self._max_node_count = max_node_count or settings.max_node_count
        self._max_depth = max_depth or settings.max_depth

    def _new_yaml(self) -> YAML:
        # A YAML instance is not safe to share between threads; build one per load.
        yaml = YAML(typ="rt")
        yaml.preserve_quotes = True
        return yaml

    # -- public loading API --------------------------------------------------

    def load(self, path: Path) -> Document:
        """Load a YAML file. ``OSError`` propagates to the caller."""
        with path.open("rb") as handle:
            return self.load_stream(handle, str(path))

    def load_stream(self, stream: IO[str] | IO[bytes], source: str = "<stdin>") -> Document:
        """Load YAML from an open text or binary stream."""
        content = stream.read()
        if isinstance(content, bytes):
            try:
                content = content.decode("utf-8-sig")
            except UnicodeDecodeError as exc:
                raise ConfigParseError(f"input is not valid UTF-8: {exc}") from exc
        return self.load_string(content, source)

    def load_string(self, content: str, source: str = "<string>") -> Document:
        """Parse YAML text into a :class:`Document`.

        Raises :class:`ConfigParseError` for malformed input and
        :class:`YAMLSafetyError` when a safety limit is exceeded.
        """
        if len(content) > self._max_document_size:
            raise YAMLSafetyError(
                f"document exceeds maximum size "
                f"({len(content):,} chars > {self._max_document_size:,} limit)"
            )
        try:
            data = self._new_yaml().load(content)
        except MarkedYAMLError as exc:
            mark = exc.problem_mark or exc.context_mark
            line, column = (mark.line + 1, mark.column + 1) if mark is not None else (0, 0)
            raise ConfigParseError(_describe(exc), line, column) from exc
        except YAMLError as exc:
            raise ConfigParseError(str(exc).strip()) from exc
        except RecursionError as exc:
            raise YAMLSafetyError("document nesting is too deep to parse") from exc

        counter = _NodeCounter(self._max_node_count)
        if data is None:
            return Document(root=NullValue(), source=source)
        root = self._convert(data, None, 0, counter)
        return Document(root=root, source=source)

    # -- conversion ----------------------------------------------------------

    def _convert(
        self, data: Any, position: Position | None, depth: int, counter: _NodeCounter
    ) -> Value:
        """Recursively convert ruamel.yaml nodes into Value nodes."""
        counter.tick()
        if depth > self._max_depth:
            raise YAMLSafetyError(
                f"document nesting exceeds maximum depth ({self._max_depth})",
                *(_coords(position)),
            )

        if isinstance(data, dict):
            map_pos = _collection_position(data) or position
            entries: list[MappingEntry] = []
            for key, item in data.items():
                counter.tick()
                key_pos = _key_position(data, key) or map_pos
                # An empty value has no token of its own; lc.value points past it.
                value_pos = key_pos if item is None else _value_position(data, key) or key_pos
                entries.append(
                    MappingEntry(
                        key=_key_text(key),
                        value=self._convert(item, value_pos, depth + 1, counter),
                        key_position=key_pos,
                    )
                )
            return MappingValue(entries=tuple(entries), position=map_pos)

        if isinstance(data, list):
            seq_pos = _collection_position(data) or position
            items: list[Value] = []
            for index, item in enumerate(data):
                item_pos = _item_position(data, index) or seq_pos
                items.append(self._convert(item, item_pos, depth + 1, counter))
            return SequenceValue(items=tuple(items), position=seq_pos)

        if data is None:
            return NullValue(position=position)
        # bool and ScalarBoolean (anchored booleans) before int: both subclass int
        if isinstance(data, (bool, ScalarBoolean)):
            return BoolValue(value=bool(data), position=position)
        if isinstance(data, int):
            return IntValue(value=int(data), position=position)
        if isinstance(data, float):
            return FloatValue(value=float(data), position=position)
        if isinstance(data, (datetime.date, datetime.datetime)):
            return StringValue(value=data.isoformat(), position=position)
        return StringValue(value=str(data), position=position)


class _NodeCounter:
    """Counts converted nodes (keys included); rejects documents that expand past the limit."""

    def __init__(self, limit: int) -> None:
        self.limit = limit
        self.count = 0

    def tick(self) -> None:
        self.count += 1
        if self.count > self.limit:
            raise YAMLSafetyError(f"document exceeds maximum node count ({self.limit:,})")


def _describe(exc: MarkedYAMLError) -> str:
    parts = [p for p in (exc.context, exc.problem) if p]
    return ", ".join(parts) if parts else str(exc).strip()


def _coords(position: Position | None) -> tuple[int, int]:
    return (position.line, position.column) if position else (0, 0)


def _key_text(key: Any) -> str:
    if isinstance(key, bool):
        return "true" if key else "false"
    if key is None:
        return "null"
    return str(key)


def _collection_position(data: Any) -> Position | None:
    try:
        return Position(line=data.lc.line + 1, column=data.lc.col + 1)
    except (AttributeError, TypeError):
        return None


def _key_position(data: Any, key: Any) -> Position | None:
    # Keys pulled in through a ``<<`` merge have no entry in the map's own lc.
    try:
        line, col = data.lc.key(key)
    except (AttributeError, KeyError, TypeError):
        return None
    return Position(line=line + 1, column=col + 1)


def _value_position(data: Any, key: Any) -> Position | None:
    try:
        line, col = data.lc.value(key)
    except (AttributeError, KeyError, TypeError):
        return None
    return Position(line=line + 1, column=col + 1)


def _item_position(data: Any, index: int) -> Position | None:
    try:
        line, col = data.lc.item(index)
    except (AttributeError, KeyError, TypeError, IndexError):
        return None
    return Position(line=line + 1, column=col + 1)
