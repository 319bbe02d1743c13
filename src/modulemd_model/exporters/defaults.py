"""Canonical emission of ``modulemd-defaults`` documents."""

from __future__ import annotations

from modulemd_model.document.node import MappingNode, emit_documents
from modulemd_model.document.subdocument import DocumentType, envelope
from modulemd_model.exporters.nodes import MappingBuilder, flow_list
from modulemd_model.models.defaults import Defaults


def emit_defaults(defaults: Defaults) -> MappingNode:
    profiles = MappingBuilder()
    for stream_name in sorted(defaults.profiles):
        profiles.add(stream_name, flow_list(defaults.profiles[stream_name]))

    data = (
        MappingBuilder()
        .add_text("module", defaults.module_name)
        .add_text("stream", defaults.default_stream)
        .add_mapping("profiles", profiles)
    )
    return envelope(DocumentType.DEFAULTS, defaults.mdversion, data.build())


def dump_defaults(defaults: Defaults) -> str:
    return emit_documents([emit_defaults(defaults)])
