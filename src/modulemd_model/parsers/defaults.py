"""Parser for ``document: modulemd-defaults`` / ``version: 1`` payloads."""

from __future__ import annotations

from modulemd_model.document.node import MappingNode
from modulemd_model.errors import ValidationError
from modulemd_model.models.defaults import Defaults
from modulemd_model.parsers.fields import MappingReader, string_set

DEFAULTS_KEYS = ("module", "stream", "profiles")


def parse_defaults_v1(data: MappingNode, strict: bool = True) -> Defaults:
    reader = MappingReader(data, "data", DEFAULTS_KEYS, strict)

    module_name = reader.text("module")
    if not module_name:
        raise ValidationError(
            "Defaults document has no module name",
            field="data.module",
            rule="missing-field",
        )

    defaults = Defaults(module_name=module_name, default_stream=reader.text("stream"))
    for stream_name, node in reader.entries("profiles"):
        defaults.profiles[stream_name] = string_set(node, f"data.profiles.{stream_name}")
    return defaults
