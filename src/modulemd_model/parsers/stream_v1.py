"""Parser for ``document: modulemd`` / ``version: 1`` payloads."""

from __future__ import annotations

import logging

from modulemd_model.document.node import MappingNode
from modulemd_model.models.stream_v1 import ModuleStreamV1
from modulemd_model.parsers.fields import MappingReader, scalar_text
from modulemd_model.parsers.stream_common import COMMON_KEYS, read_common_fields

logger = logging.getLogger(__name__)

DATA_KEYS_V1 = COMMON_KEYS + ("eol",)


def _requirement_map(mapping: MappingNode | None, path: str) -> dict[str, str]:
    if mapping is None:
        return {}
    requirements = {}
    for module_name, node in mapping.pairs:
        stream_name = scalar_text(node, f"{path}.{module_name}")
        if stream_name is not None:
            requirements[module_name] = stream_name
    return requirements


def parse_stream_v1(data: MappingNode, strict: bool = True) -> ModuleStreamV1:
    """Build and validate a v1 stream from the ``data`` mapping."""
    reader = MappingReader(data, "data", DATA_KEYS_V1, strict)
    stream = ModuleStreamV1()
    read_common_fields(reader, stream)

    stream.eol = reader.date("eol")

    dependencies = reader.child("dependencies", ("buildrequires", "requires"))
    if dependencies is not None:
        stream.buildtime_requirements = _requirement_map(
            dependencies.mapping("buildrequires"), dependencies.field_path("buildrequires")
        )
        stream.runtime_requirements = _requirement_map(
            dependencies.mapping("requires"), dependencies.field_path("requires")
        )

    buildopts = reader.child("buildopts", ("rpms",))
    if buildopts is not None:
        rpms = buildopts.child("rpms", ("macros",))
        if rpms is not None:
            stream.buildopts.rpm_macros = rpms.text("macros")

    artifacts = reader.child("artifacts", ("rpms",))
    if artifacts is not None:
        stream.rpm_artifacts = artifacts.string_set("rpms")

    stream.validate()
    logger.debug(f"[MMD-PARSE] Parsed v1 stream {stream.nsvca_string() or '<unnamed>'}")
    return stream
