"""
Reader — turns YAML text or files into streams and defaults.

Strictness controls what happens to keys the schema does not know:
STRICT rejects them with a ValidationError, PERMISSIVE skips them. When a
caller does not choose, the MODULEMD_STRICTNESS environment variable
decides, and strict mode is the fallback.
"""

from __future__ import annotations

import logging
import os
from enum import Enum
from pathlib import Path

import aiofiles

from modulemd_model.document.node import Node, parse_documents
from modulemd_model.document.subdocument import DocumentType, classify
from modulemd_model.errors import ParseError
from modulemd_model.models.defaults import Defaults
from modulemd_model.models.stream import ModuleStream
from modulemd_model.parsers.defaults import parse_defaults_v1
from modulemd_model.parsers.stream_v1 import parse_stream_v1
from modulemd_model.parsers.stream_v2 import parse_stream_v2

logger = logging.getLogger(__name__)

STRICTNESS_ENV = "MODULEMD_STRICTNESS"


class Strictness(Enum):
    STRICT = "strict"
    PERMISSIVE = "permissive"

    @classmethod
    def resolve(cls, strictness: Strictness | None = None) -> Strictness:
        """An explicit setting wins; otherwise consult the environment."""
        if strictness is not None:
            return strictness
        value = os.environ.get(STRICTNESS_ENV, "").strip().lower()
        if not value:
            return cls.STRICT
        try:
            return cls(value)
        except ValueError:
            logger.warning(f"[CONFIG] Ignoring {STRICTNESS_ENV}={value!r}; expected 'strict' or 'permissive'")
            return cls.STRICT

    @property
    def strict(self) -> bool:
        return self is Strictness.STRICT


def read_subdocument(node: Node, document_index: int = 0, strict: bool = True) -> ModuleStream | Defaults:
    """Classify one parsed document and run the matching schema parser."""
    info = classify(node, strict=strict, document_index=document_index)
    match (info.doctype, info.mdversion):
        case (DocumentType.MODULESTREAM, 1):
            return parse_stream_v1(info.data, strict)
        case (DocumentType.MODULESTREAM, 2):
            return parse_stream_v2(info.data, strict)
        case (DocumentType.DEFAULTS, 1):
            return parse_defaults_v1(info.data, strict)
        case _:
            # classify() only lets supported combinations through
            raise ParseError(
                f"No parser for {info.doctype.value} version {info.mdversion}",
                document_index=document_index,
            )


def read_string(text: str | bytes, strictness: Strictness | None = None) -> list[ModuleStream | Defaults]:
    """Read every document in ``text``; the first failure is raised."""
    strict = Strictness.resolve(strictness).strict
    return [read_subdocument(node, index, strict) for index, node in parse_documents(text)]


def read_stream(
    text: str | bytes,
    strictness: Strictness | None = None,
    module_name: str | None = None,
    stream_name: str | None = None,
) -> ModuleStream:
    """
    Read text holding exactly one module stream document.

    ``module_name`` and ``stream_name``, when given, replace the names in
    the document.
    """
    documents = read_string(text, strictness)
    if len(documents) != 1 or not isinstance(documents[0], ModuleStream):
        raise ParseError(f"Expected a single module stream document, found {len(documents)} document(s)")

    stream = documents[0]
    if module_name:
        stream.module_name = module_name
    if stream_name:
        stream.stream_name = stream_name
    return stream


async def read_file(path: Path | str) -> str:
    """Read a whole YAML file."""
    async with aiofiles.open(path, "r", encoding="utf-8") as f:
        text = await f.read()
    logger.debug(f"[READ] Loaded {path} ({len(text)} chars)")
    return text
