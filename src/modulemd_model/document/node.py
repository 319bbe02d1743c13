"""
Generic Document Node — a YAML tree that keeps what canonical output needs.

PyYAML composes text into its own node graph; this module converts that
graph into small dataclasses which keep mapping order, the resolved scalar
kind and the scalar style. The reverse direction builds a fresh PyYAML node
graph and hands it to the serializer, so the two ends of the pipeline
never touch Python objects directly.
"""

from __future__ import annotations

import datetime
import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar

import yaml
from yaml.constructor import SafeConstructor
from yaml.representer import SafeRepresenter
from yaml.resolver import Resolver

from modulemd_model.errors import EmitError, ParseError

logger = logging.getLogger(__name__)

TAG_PREFIX = "tag:yaml.org,2002:"


class ScalarKind(Enum):
    """Type a scalar resolves to under the YAML 1.1 core schema."""

    NULL = "null"
    BOOL = "bool"
    INT = "int"
    FLOAT = "float"
    TIMESTAMP = "timestamp"
    STRING = "str"

    @property
    def tag(self) -> str:
        return TAG_PREFIX + self.value


class ScalarStyle(Enum):
    PLAIN = None
    SINGLE_QUOTED = "'"
    DOUBLE_QUOTED = '"'
    LITERAL = "|"
    FOLDED = ">"


_KINDS_BY_TAG = {kind.tag: kind for kind in ScalarKind}
_resolver = Resolver()


def resolve_kind(text: str) -> ScalarKind:
    """Kind a plain (unquoted) scalar with this text would resolve to."""
    tag = _resolver.resolve(yaml.ScalarNode, text, (True, False))
    return _KINDS_BY_TAG.get(tag, ScalarKind.STRING)


# ═══════════════════════════════════════════
# Node types
# ═══════════════════════════════════════════


@dataclass
class ScalarNode:
    text: str
    kind: ScalarKind = ScalarKind.STRING
    style: ScalarStyle = field(default=ScalarStyle.PLAIN, compare=False)
    line: int | None = field(default=None, compare=False, repr=False)
    column: int | None = field(default=None, compare=False, repr=False)

    kind_name: ClassVar[str] = "scalar"

    def to_python(self) -> Any:
        """Construct the plain Python value (timestamps stay as text)."""
        if self.kind in (ScalarKind.STRING, ScalarKind.TIMESTAMP):
            return self.text
        yaml_node = yaml.ScalarNode(self.kind.tag, self.text)
        return SafeConstructor().construct_object(yaml_node)

    def copy(self) -> ScalarNode:
        return ScalarNode(self.text, self.kind, self.style, self.line, self.column)


@dataclass
class SequenceNode:
    items: list[Node] = field(default_factory=list)
    flow: bool = field(default=False, compare=False)
    line: int | None = field(default=None, compare=False, repr=False)
    column: int | None = field(default=None, compare=False, repr=False)

    kind_name: ClassVar[str] = "sequence"

    def to_python(self) -> list:
        return [item.to_python() for item in self.items]

    def copy(self) -> SequenceNode:
        return SequenceNode([item.copy() for item in self.items], self.flow, self.line, self.column)


@dataclass
class MappingNode:
    """Ordered mapping; keys are the text of scalar keys, in document order."""

    pairs: list[tuple[str, Node]] = field(default_factory=list)
    flow: bool = field(default=False, compare=False)
    line: int | None = field(default=None, compare=False, repr=False)
    column: int | None = field(default=None, compare=False, repr=False)

    kind_name: ClassVar[str] = "mapping"

    def get(self, key: str, default: Node | None = None) -> Node | None:
        for name, value in self.pairs:
            if name == key:
                return value
        return default

    def __contains__(self, key: str) -> bool:
        return any(name == key for name, _ in self.pairs)

    def keys(self) -> list[str]:
        return [name for name, _ in self.pairs]

    def set(self, key: str, value: Node) -> None:
        """Replace the value of an existing key in place, or append it."""
        for i, (name, _) in enumerate(self.pairs):
            if name == key:
                self.pairs[i] = (key, value)
                return
        self.pairs.append((key, value))

    def to_python(self) -> dict:
        return {name: value.to_python() for name, value in self.pairs}

    def copy(self) -> MappingNode:
        return MappingNode(
            [(name, value.copy()) for name, value in self.pairs], self.flow, self.line, self.column
        )


Node = ScalarNode | SequenceNode | MappingNode


def node_from_python(value: Any) -> Node:
    """Build a node tree from plain Python data (dicts keep their order)."""
    if isinstance(value, (ScalarNode, SequenceNode, MappingNode)):
        return value.copy()
    if value is None:
        return ScalarNode("null", ScalarKind.NULL)
    # bool first: it is a subclass of int
    if isinstance(value, bool):
        return ScalarNode("true" if value else "false", ScalarKind.BOOL)
    if isinstance(value, int):
        return ScalarNode(str(value), ScalarKind.INT)
    if isinstance(value, float):
        return ScalarNode(SafeRepresenter().represent_float(value).value, ScalarKind.FLOAT)
    if isinstance(value, datetime.date):
        return ScalarNode(value.isoformat(), ScalarKind.TIMESTAMP)
    if isinstance(value, str):
        return ScalarNode(value, ScalarKind.STRING)
    if isinstance(value, dict):
        return MappingNode([(str(k), node_from_python(v)) for k, v in value.items()])
    if isinstance(value, (list, tuple)):
        return SequenceNode([node_from_python(v) for v in value])
    if isinstance(value, (set, frozenset)):
        return SequenceNode([node_from_python(v) for v in sorted(value)])
    raise TypeError(f"Cannot represent {type(value).__name__} as a document node")


# ═══════════════════════════════════════════
# Parsing
# ═══════════════════════════════════════════


def _convert(yaml_node: yaml.Node, active: set[int]) -> Node:
    line = yaml_node.start_mark.line + 1 if yaml_node.start_mark else None
    column = yaml_node.start_mark.column + 1 if yaml_node.start_mark else None

    if isinstance(yaml_node, yaml.ScalarNode):
        kind = _KINDS_BY_TAG.get(yaml_node.tag, ScalarKind.STRING)
        return ScalarNode(yaml_node.value, kind, ScalarStyle(yaml_node.style), line, column)

    # Anchors may point back at an enclosing collection
    if id(yaml_node) in active:
        raise ParseError("Recursive alias is not supported", line=line, column=column)
    active.add(id(yaml_node))
    try:
        if isinstance(yaml_node, yaml.SequenceNode):
            items = [_convert(item, active) for item in yaml_node.value]
            return SequenceNode(items, bool(yaml_node.flow_style), line, column)

        pairs = []
        for key_node, value_node in yaml_node.value:
            if not isinstance(key_node, yaml.ScalarNode):
                raise ParseError(
                    "Mapping keys must be scalars",
                    line=key_node.start_mark.line + 1,
                    column=key_node.start_mark.column + 1,
                )
            pairs.append((key_node.value, _convert(value_node, active)))
        return MappingNode(pairs, bool(yaml_node.flow_style), line, column)
    finally:
        active.discard(id(yaml_node))


def _parse_error(exc: yaml.YAMLError, document_index: int | None) -> ParseError:
    if isinstance(exc, yaml.MarkedYAMLError) and exc.problem_mark is not None:
        return ParseError(
            exc.problem or str(exc),
            line=exc.problem_mark.line + 1,
            column=exc.problem_mark.column + 1,
            document_index=document_index,
        )
    return ParseError(str(exc), document_index=document_index)


def compose_documents(text: str | bytes) -> Iterator[tuple[int, yaml.Node]]:
    """
    Yield (document_index, composed PyYAML node) for every document.

    Only YAML syntax errors are raised here, as a ParseError naming the
    index of the document being read. Documents yielded before it stay
    valid for the caller; nothing after it can be tokenized.
    """
    index = 0
    documents = yaml.compose_all(text, Loader=yaml.SafeLoader)
    while True:
        try:
            yaml_node = next(documents)
        except StopIteration:
            return
        except yaml.YAMLError as e:
            raise _parse_error(e, index) from e
        yield index, yaml_node
        index += 1


def to_node(yaml_node: yaml.Node, document_index: int | None = None) -> Node:
    """Convert one composed document; content errors carry ``document_index``."""
    try:
        node = _convert(yaml_node, set())
    except ParseError as e:
        raise ParseError(e.message, line=e.line, column=e.column, document_index=document_index) from e
    logger.debug(f"[YAML] Parsed document {document_index} ({node.kind_name})")
    return node


def parse_documents(text: str | bytes) -> Iterator[tuple[int, Node]]:
    """
    Yield (document_index, node) for every document in a YAML stream.

    The first error, syntax or content, ends the iteration.
    """
    for index, yaml_node in compose_documents(text):
        yield index, to_node(yaml_node, index)


def parse_document(text: str | bytes) -> Node:
    """Parse text holding exactly one YAML document."""
    try:
        yaml_node = yaml.compose(text, Loader=yaml.SafeLoader)
    except yaml.YAMLError as e:
        raise _parse_error(e, 0) from e
    if yaml_node is None:
        raise ParseError("No YAML document found", document_index=0)
    return to_node(yaml_node, 0)


# ═══════════════════════════════════════════
# Emission
# ═══════════════════════════════════════════


def _to_yaml(node: Node) -> yaml.Node:
    if isinstance(node, ScalarNode):
        if node.kind is ScalarKind.STRING:
            return yaml.ScalarNode(ScalarKind.STRING.tag, node.text, style=node.style.value)
        return yaml.ScalarNode(node.kind.tag, node.text)

    if isinstance(node, SequenceNode):
        return yaml.SequenceNode(
            TAG_PREFIX + "seq", [_to_yaml(item) for item in node.items], flow_style=node.flow
        )

    if isinstance(node, MappingNode):
        pairs = []
        for key, value in node.pairs:
            key_tag = _resolver.resolve(yaml.ScalarNode, key, (True, False))
            pairs.append((yaml.ScalarNode(key_tag, key), _to_yaml(value)))
        return yaml.MappingNode(TAG_PREFIX + "map", pairs, flow_style=node.flow)

    raise EmitError(f"Not a document node: {type(node).__name__}")


def emit_documents(nodes: Iterable[Node]) -> str:
    """Serialize nodes as a YAML stream with explicit start and end markers."""
    yaml_nodes = [_to_yaml(node) for node in nodes]
    try:
        return yaml.serialize_all(
            yaml_nodes,
            Dumper=yaml.SafeDumper,
            explicit_start=True,
            explicit_end=True,
            allow_unicode=True,
        )
    except yaml.YAMLError as e:
        raise EmitError(f"YAML emission failed: {e}") from e


def emit_document(node: Node) -> str:
    return emit_documents([node])
