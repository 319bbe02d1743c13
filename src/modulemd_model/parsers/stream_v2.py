"""Parser for ``document: modulemd`` / ``version: 2`` payloads."""

from __future__ import annotations

import logging

from modulemd_model.document.node import MappingNode, SequenceNode
from modulemd_model.models.stream_v2 import ModuleStreamV2
from modulemd_model.parsers.entities import parse_dependencies, parse_rpm_map_entry
from modulemd_model.parsers.fields import MappingReader, expect
from modulemd_model.parsers.stream_common import COMMON_KEYS, read_common_fields

logger = logging.getLogger(__name__)


def _read_rpm_map(stream: ModuleStreamV2, mapping: MappingNode, path: str, strict: bool) -> None:
    for checksum_type, by_checksum in mapping.pairs:
        type_path = f"{path}.{checksum_type}"
        expect(by_checksum, MappingNode, type_path)
        for checksum, node in by_checksum.pairs:
            entry = parse_rpm_map_entry(node, f"{type_path}.{checksum}", strict)
            stream.rpm_artifact_map.setdefault(checksum_type, {})[checksum] = entry


def parse_stream_v2(data: MappingNode, strict: bool = True) -> ModuleStreamV2:
    """Build and validate a v2 stream from the ``data`` mapping."""
    reader = MappingReader(data, "data", COMMON_KEYS, strict)
    stream = ModuleStreamV2()
    read_common_fields(reader, stream)

    dependencies = reader.get("dependencies")
    if dependencies is not None:
        path = reader.field_path("dependencies")
        expect(dependencies, SequenceNode, path)
        for i, node in enumerate(dependencies.items):
            stream.dependencies.append(parse_dependencies(node, f"{path}[{i}]", strict))

    buildopts = reader.child("buildopts", ("rpms", "arches"))
    if buildopts is not None:
        rpms = buildopts.child("rpms", ("macros", "whitelist"))
        if rpms is not None:
            stream.buildopts.rpm_macros = rpms.text("macros")
            stream.buildopts.rpm_whitelist = rpms.string_set("whitelist")
        stream.buildopts.arches = buildopts.string_set("arches")

    artifacts = reader.child("artifacts", ("rpms", "rpm-map"))
    if artifacts is not None:
        stream.rpm_artifacts = artifacts.string_set("rpms")
        rpm_map = artifacts.mapping("rpm-map")
        if rpm_map is not None:
            _read_rpm_map(stream, rpm_map, artifacts.field_path("rpm-map"), strict)

    stream.validate()
    logger.debug(f"[MMD-PARSE] Parsed v2 stream {stream.nsvca_string() or '<unnamed>'}")
    return stream
