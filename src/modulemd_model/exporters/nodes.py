"""Node builders used by the canonical emitters."""

from __future__ import annotations

from collections.abc import Iterable

from modulemd_model.document.node import MappingNode, Node, ScalarKind, ScalarNode, ScalarStyle, SequenceNode, resolve_kind

# Text that reads back as one of these kinds is written bare, so that
# "1.23" or "2077-10-23" does not come out quoted.
_BARE_KINDS = (ScalarKind.INT, ScalarKind.FLOAT, ScalarKind.TIMESTAMP)


def text(value: str) -> ScalarNode:
    kind = resolve_kind(value)
    if kind in _BARE_KINDS:
        return ScalarNode(value, kind)
    return ScalarNode(value)


def integer(value: int) -> ScalarNode:
    return ScalarNode(str(value), ScalarKind.INT)


def folded(value: str) -> ScalarNode:
    return ScalarNode(value, ScalarKind.STRING, ScalarStyle.FOLDED)


def block_list(values: Iterable[str]) -> SequenceNode:
    return SequenceNode([text(v) for v in sorted(values)])


def flow_list(values: Iterable[str]) -> SequenceNode:
    return SequenceNode([text(v) for v in sorted(values)], flow=True)


class MappingBuilder:
    """Collects key/value pairs in insertion order, skipping unset values."""

    def __init__(self) -> None:
        self.pairs: list[tuple[str, Node]] = []

    def add(self, key: str, value: Node | None) -> MappingBuilder:
        if value is not None:
            self.pairs.append((key, value))
        return self

    def add_text(self, key: str, value: str | None) -> MappingBuilder:
        return self.add(key, text(value) if value is not None else None)

    def add_block_list(self, key: str, values: Iterable[str]) -> MappingBuilder:
        values = list(values)
        return self.add(key, block_list(values) if values else None)

    def add_flow_list(self, key: str, values: Iterable[str]) -> MappingBuilder:
        values = list(values)
        return self.add(key, flow_list(values) if values else None)

    def add_mapping(self, key: str, builder: MappingBuilder) -> MappingBuilder:
        return self.add(key, builder.build() if builder else None)

    def __bool__(self) -> bool:
        return bool(self.pairs)

    def build(self) -> MappingNode:
        return MappingNode(list(self.pairs))
