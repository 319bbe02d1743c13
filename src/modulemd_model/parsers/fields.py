"""
Typed access to the fields of a document mapping.

The schema parsers never look at raw nodes directly; they wrap each
mapping in a MappingReader which checks the key set against the schema
and converts values, raising ValidationError with the dotted field path
when a value has the wrong shape.
"""

from __future__ import annotations

import datetime
import logging
from collections.abc import Iterable

from modulemd_model.document.node import MappingNode, Node, ScalarKind, ScalarNode, SequenceNode
from modulemd_model.errors import ValidationError
from modulemd_model.models.stream import UINT64_MAX

logger = logging.getLogger(__name__)


def expect(node: Node, kind: type, path: str) -> Node:
    if not isinstance(node, kind):
        raise ValidationError(
            f"Field '{path}' must be a {kind.kind_name}, got {node.kind_name}",
            field=path,
            rule="node-kind",
            expected_kind=kind.kind_name,
            actual_kind=node.kind_name,
            line=node.line,
        )
    return node


def scalar_text(node: Node, path: str) -> str | None:
    scalar = expect(node, ScalarNode, path)
    if scalar.kind is ScalarKind.NULL:
        return None
    return scalar.text


def string_set(node: Node, path: str) -> set[str]:
    sequence = expect(node, SequenceNode, path)
    values = set()
    for i, item in enumerate(sequence.items):
        text = scalar_text(item, f"{path}[{i}]")
        if text is not None:
            values.add(text)
    return values


def integer(node: Node, path: str, minimum: int = 0, maximum: int = UINT64_MAX) -> int:
    scalar = expect(node, ScalarNode, path)
    if scalar.kind is not ScalarKind.INT:
        raise ValidationError(
            f"Field '{path}' must be an integer, got {scalar.text!r}",
            field=path,
            rule="node-kind",
            expected_kind="int",
            actual_kind=scalar.kind.value,
            line=scalar.line,
        )
    value = scalar.to_python()
    if not minimum <= value <= maximum:
        raise ValidationError(
            f"Field '{path}' is out of range: {value}",
            field=path,
            rule="out-of-range",
            line=scalar.line,
        )
    return value


def iso_date(node: Node, path: str) -> datetime.date:
    text = scalar_text(node, path)
    try:
        return datetime.date.fromisoformat(text or "")
    except ValueError:
        raise ValidationError(
            f"Field '{path}' is not an ISO 8601 date: {text!r}",
            field=path,
            rule="invalid-date",
            expected_kind="timestamp",
            actual_kind=node.kind.value,
            line=node.line,
        ) from None


def check_unique_keys(mapping: MappingNode, path: str, strict: bool) -> None:
    """Reject repeated keys when strict; otherwise the first occurrence wins."""
    seen = set()
    for key, value in mapping.pairs:
        if key not in seen:
            seen.add(key)
            continue
        field_path = f"{path}.{key}"
        if strict:
            raise ValidationError(
                f"Duplicate key '{key}' in '{path}'",
                field=field_path,
                rule="duplicate-key",
                line=value.line,
            )
        logger.debug(f"[MMD-PARSE] Ignoring repeated key '{field_path}'")


class MappingReader:
    """A schema mapping whose keys have been checked against ``allowed``."""

    def __init__(self, node: Node, path: str, allowed: Iterable[str], strict: bool):
        self.node: MappingNode = expect(node, MappingNode, path)
        self.path = path
        self.strict = strict
        check_unique_keys(self.node, path, strict)

        allowed = frozenset(allowed)
        for key in self.node.keys():
            if key in allowed:
                continue
            field_path = f"{path}.{key}"
            if strict:
                raise ValidationError(
                    f"Unknown key '{key}' in '{path}'",
                    field=field_path,
                    rule="unknown-key",
                    line=self.node.get(key).line,
                )
            logger.debug(f"[MMD-PARSE] Ignoring unknown key '{field_path}'")

    def field_path(self, key: str) -> str:
        return f"{self.path}.{key}"

    def __contains__(self, key: str) -> bool:
        return key in self.node

    def get(self, key: str) -> Node | None:
        return self.node.get(key)

    def text(self, key: str) -> str | None:
        value = self.node.get(key)
        return scalar_text(value, self.field_path(key)) if value is not None else None

    def integer(self, key: str, default: int = 0, minimum: int = 0, maximum: int = UINT64_MAX) -> int:
        value = self.node.get(key)
        return integer(value, self.field_path(key), minimum, maximum) if value is not None else default

    def date(self, key: str) -> datetime.date | None:
        value = self.node.get(key)
        return iso_date(value, self.field_path(key)) if value is not None else None

    def string_set(self, key: str) -> set[str]:
        value = self.node.get(key)
        return string_set(value, self.field_path(key)) if value is not None else set()

    def child(self, key: str, allowed: Iterable[str]) -> MappingReader | None:
        value = self.node.get(key)
        if value is None:
            return None
        return MappingReader(value, self.field_path(key), allowed, self.strict)

    def mapping(self, key: str) -> MappingNode | None:
        value = self.node.get(key)
        if value is None:
            return None
        mapping = expect(value, MappingNode, self.field_path(key))
        check_unique_keys(mapping, self.field_path(key), self.strict)
        keys = mapping.keys()
        if len(set(keys)) == len(keys):
            return mapping
        pairs = [(name, mapping.get(name)) for name in dict.fromkeys(keys)]
        return MappingNode(pairs, mapping.flow, mapping.line, mapping.column)

    def entries(self, key: str) -> list[tuple[str, Node]]:
        """Pairs of a free-keyed mapping such as ``profiles`` or ``components.rpms``."""
        mapping = self.mapping(key)
        return list(mapping.pairs) if mapping is not None else []
