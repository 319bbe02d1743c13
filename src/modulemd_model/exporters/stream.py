"""
Canonical stream emission.

Keys are written in a fixed order rather than insertion order, and every
set is written sorted, so two equal streams always produce the same bytes.
"""

from __future__ import annotations

import logging

from modulemd_model.document.node import MappingNode, SequenceNode, emit_documents
from modulemd_model.document.subdocument import DocumentType, envelope
from modulemd_model.exporters.nodes import MappingBuilder, flow_list, folded, integer, text
from modulemd_model.models.buildopts import BuildOpts
from modulemd_model.models.component import Component, ModuleComponent, RpmComponent
from modulemd_model.models.stream import ModuleStream
from modulemd_model.models.stream_v1 import ModuleStreamV1
from modulemd_model.models.stream_v2 import ModuleStreamV2

logger = logging.getLogger(__name__)


def _servicelevels(stream: ModuleStream) -> MappingBuilder:
    levels = MappingBuilder()
    for name in stream.get_servicelevel_names():
        eol = stream.servicelevels[name].eol_string()
        levels.add(name, MappingBuilder().add_text("eol", eol).build())
    return levels


def _v1_dependencies(stream: ModuleStreamV1) -> MappingBuilder:
    deps = MappingBuilder()
    for key, requirements in (
        ("buildrequires", stream.buildtime_requirements),
        ("requires", stream.runtime_requirements),
    ):
        side = MappingBuilder()
        for module_name in sorted(requirements):
            side.add_text(module_name, requirements[module_name])
        deps.add_mapping(key, side)
    return deps


def _v2_dependencies(stream: ModuleStreamV2) -> SequenceNode | None:
    if not stream.dependencies:
        return None
    items = []
    for deps in stream.dependencies:
        entry = MappingBuilder()
        for key, requirements in (("buildrequires", deps.buildrequires), ("requires", deps.requires)):
            side = MappingBuilder()
            for module_name in sorted(requirements):
                side.add(module_name, flow_list(requirements[module_name]))
            entry.add_mapping(key, side)
        items.append(entry.build())
    return SequenceNode(items)


def _profiles(stream: ModuleStream) -> MappingBuilder:
    profiles = MappingBuilder()
    for name in stream.get_profile_names():
        profile = stream.profiles[name]
        body = MappingBuilder().add_text("description", profile.description).add_block_list("rpms", profile.rpms)
        profiles.add(name, body.build())
    return profiles


def _buildopts(buildopts: BuildOpts, mdversion: int) -> MappingBuilder:
    rpms = MappingBuilder()
    if buildopts.rpm_macros is not None:
        rpms.add("macros", folded(buildopts.rpm_macros))
    if mdversion >= 2:
        rpms.add_block_list("whitelist", buildopts.rpm_whitelist)

    opts = MappingBuilder().add_mapping("rpms", rpms)
    if mdversion >= 2:
        opts.add_flow_list("arches", buildopts.arches)
    return opts


def _component(component: Component) -> MappingNode:
    body = MappingBuilder().add_text("rationale", component.rationale)
    if isinstance(component, RpmComponent):
        body.add_text("name", component.package_name)
    body.add_text("repository", component.repository)
    if isinstance(component, RpmComponent):
        body.add_text("cache", component.cache)
    body.add_text("ref", component.ref)
    body.add_block_list("buildafter", component.buildafter)
    if component.buildorder:
        body.add("buildorder", integer(component.buildorder))
    if isinstance(component, RpmComponent):
        body.add_flow_list("arches", component.arches)
        body.add_flow_list("multilib", component.multilib)
    return body.build()


def _components(stream: ModuleStream) -> MappingBuilder:
    rpms = MappingBuilder()
    for name in stream.get_rpm_component_names():
        rpms.add(name, _component(stream.rpm_components[name]))
    modules = MappingBuilder()
    for name in stream.get_module_component_names():
        modules.add(name, _component(stream.module_components[name]))
    return MappingBuilder().add_mapping("rpms", rpms).add_mapping("modules", modules)


def _artifacts(stream: ModuleStream) -> MappingBuilder:
    artifacts = MappingBuilder().add_block_list("rpms", stream.rpm_artifacts)
    if not isinstance(stream, ModuleStreamV2):
        return artifacts

    rpm_map = MappingBuilder()
    for checksum_type in sorted(stream.rpm_artifact_map):
        by_checksum = MappingBuilder()
        entries = stream.rpm_artifact_map[checksum_type]
        for checksum in sorted(entries):
            entry = entries[checksum]
            by_checksum.add(
                checksum,
                MappingBuilder()
                .add_text("name", entry.name)
                .add("epoch", integer(entry.epoch))
                .add_text("version", entry.version)
                .add_text("release", entry.release)
                .add_text("arch", entry.arch)
                .add_text("nevra", entry.nevra)
                .build(),
            )
        rpm_map.add_mapping(checksum_type, by_checksum)
    return artifacts.add_mapping("rpm-map", rpm_map)


def stream_data(stream: ModuleStream) -> MappingNode:
    """The ``data`` mapping of a stream, in canonical key order."""
    data = MappingBuilder()
    data.add_text("name", stream.module_name)
    data.add_text("stream", stream.stream_name)
    if stream.version:
        data.add("version", integer(stream.version))
    data.add_text("context", stream.context)
    data.add_text("arch", stream.arch)
    data.add_text("summary", stream.summary)
    if stream.description is not None:
        data.add("description", folded(stream.description))
    if isinstance(stream, ModuleStreamV1) and stream.eol is not None:
        data.add_text("eol", stream.eol.isoformat())

    data.add_mapping("servicelevels", _servicelevels(stream))
    data.add_mapping(
        "license",
        MappingBuilder()
        .add_block_list("module", stream.module_licenses)
        .add_block_list("content", stream.content_licenses),
    )
    if stream.xmd is not None:
        data.add("xmd", stream.xmd.copy())

    if isinstance(stream, ModuleStreamV1):
        data.add_mapping("dependencies", _v1_dependencies(stream))
    elif isinstance(stream, ModuleStreamV2):
        data.add("dependencies", _v2_dependencies(stream))

    data.add_mapping(
        "references",
        MappingBuilder()
        .add_text("community", stream.community)
        .add_text("documentation", stream.documentation)
        .add_text("tracker", stream.tracker),
    )
    data.add_mapping("profiles", _profiles(stream))
    data.add_mapping("api", MappingBuilder().add_block_list("rpms", stream.rpm_api))
    data.add_mapping("filter", MappingBuilder().add_block_list("rpms", stream.rpm_filters))
    data.add_mapping("buildopts", _buildopts(stream.buildopts, stream.mdversion))
    data.add_mapping("components", _components(stream))
    data.add_mapping("artifacts", _artifacts(stream))
    return data.build()


def emit_stream(stream: ModuleStream) -> MappingNode:
    """Validate a stream and build its complete document node."""
    stream.validate()
    return envelope(DocumentType.MODULESTREAM, stream.mdversion, stream_data(stream))


def dump_stream(stream: ModuleStream) -> str:
    """A stream as a single YAML document."""
    output = emit_documents([emit_stream(stream)])
    logger.debug(f"[MMD-EMIT] Dumped {stream.nsvca_string() or '<unnamed>'} ({len(output)} bytes)")
    return output
