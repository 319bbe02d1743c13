"""
Subdocument Classifier — reads the document/version/data envelope.

Every module metadata document is a mapping with three keys:

    document: modulemd            # or modulemd-defaults
    version: 2
    data: { ... }

The classifier checks the envelope and reports which schema parser should
read the payload. It never looks inside ``data``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from modulemd_model.document.node import MappingNode, Node, ScalarKind, ScalarNode
from modulemd_model.errors import ParseError, ValidationError

logger = logging.getLogger(__name__)

ENVELOPE_KEYS = ("document", "version", "data")


class DocumentType(Enum):
    MODULESTREAM = "modulemd"
    DEFAULTS = "modulemd-defaults"


SUPPORTED_VERSIONS: dict[DocumentType, tuple[int, ...]] = {
    DocumentType.MODULESTREAM: (1, 2),
    DocumentType.DEFAULTS: (1,),
}


@dataclass
class SubdocumentInfo:
    """A classified document, ready to be handed to its schema parser."""

    doctype: DocumentType
    mdversion: int
    data: MappingNode
    document_index: int = 0


def _envelope_scalar(root: MappingNode, key: str, document_index: int) -> ScalarNode:
    value = root.get(key)
    if value is None:
        raise ParseError(
            f"Missing '{key}' in document envelope",
            line=root.line,
            document_index=document_index,
        )
    if not isinstance(value, ScalarNode):
        raise ParseError(
            f"Envelope field '{key}' must be a scalar, got {value.kind_name}",
            line=value.line,
            column=value.column,
            document_index=document_index,
        )
    return value


def classify(node: Node, strict: bool = True, document_index: int = 0) -> SubdocumentInfo:
    """Validate the envelope of one parsed document."""
    if not isinstance(node, MappingNode):
        raise ParseError(
            f"Document root must be a mapping, got {node.kind_name}",
            line=node.line,
            column=node.column,
            document_index=document_index,
        )

    doc_value = _envelope_scalar(node, "document", document_index)
    try:
        doctype = DocumentType(doc_value.text)
    except ValueError:
        raise ParseError(
            f"Unknown document type: {doc_value.text!r}",
            line=doc_value.line,
            column=doc_value.column,
            document_index=document_index,
        ) from None

    version_value = _envelope_scalar(node, "version", document_index)
    if version_value.kind is not ScalarKind.INT:
        raise ParseError(
            f"Document version must be an integer, got {version_value.text!r}",
            line=version_value.line,
            column=version_value.column,
            document_index=document_index,
        )
    mdversion = version_value.to_python()
    if mdversion not in SUPPORTED_VERSIONS[doctype]:
        raise ParseError(
            f"Unsupported {doctype.value} version: {mdversion}",
            line=version_value.line,
            column=version_value.column,
            document_index=document_index,
        )

    for key in node.keys():
        if key in ENVELOPE_KEYS:
            continue
        if strict:
            raise ValidationError(
                f"Unknown key '{key}' in document envelope",
                field=key,
                rule="unknown-key",
                line=node.get(key).line,
            )
        logger.debug(f"[MMD-PARSE] Ignoring unknown envelope key '{key}' in document {document_index}")

    data = node.get("data")
    if data is None:
        raise ParseError("Missing 'data' in document envelope", line=node.line, document_index=document_index)
    if not isinstance(data, MappingNode):
        raise ValidationError(
            "Document 'data' must be a mapping",
            field="data",
            rule="node-kind",
            expected_kind="mapping",
            actual_kind=data.kind_name,
            line=data.line,
        )

    return SubdocumentInfo(doctype, mdversion, data, document_index)


def envelope(doctype: DocumentType, mdversion: int, data: MappingNode) -> MappingNode:
    """Wrap a payload mapping in its document envelope."""
    return MappingNode(
        [
            ("document", ScalarNode(doctype.value)),
            ("version", ScalarNode(str(mdversion), ScalarKind.INT)),
            ("data", data),
        ]
    )
