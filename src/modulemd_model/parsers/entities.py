"""Parsers for the small value types nested inside a stream document."""

from __future__ import annotations

from modulemd_model.document.node import MappingNode, Node, SequenceNode
from modulemd_model.errors import ValidationError
from modulemd_model.models.component import ModuleComponent, RpmComponent
from modulemd_model.models.dependencies import Dependencies
from modulemd_model.models.profile import Profile
from modulemd_model.models.rpm_map import RpmMapEntry
from modulemd_model.models.service_level import ServiceLevel
from modulemd_model.parsers.fields import MappingReader, expect, string_set

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

PROFILE_KEYS = ("description", "rpms")
SERVICELEVEL_KEYS = ("eol",)
RPM_COMPONENT_KEYS_V1 = ("rationale", "name", "repository", "cache", "ref", "buildorder", "arches", "multilib")
RPM_COMPONENT_KEYS_V2 = RPM_COMPONENT_KEYS_V1 + ("buildafter",)
MODULE_COMPONENT_KEYS_V1 = ("rationale", "repository", "ref", "buildorder")
MODULE_COMPONENT_KEYS_V2 = MODULE_COMPONENT_KEYS_V1 + ("buildafter",)
DEPENDENCIES_KEYS = ("buildrequires", "requires")
RPM_MAP_ENTRY_KEYS = ("name", "epoch", "version", "release", "arch", "nevra")


def parse_profile(name: str, node: Node, path: str, strict: bool) -> Profile:
    reader = MappingReader(node, path, PROFILE_KEYS, strict)
    return Profile(name=name, description=reader.text("description"), rpms=reader.string_set("rpms"))


def parse_servicelevel(name: str, node: Node, path: str, strict: bool) -> ServiceLevel:
    reader = MappingReader(node, path, SERVICELEVEL_KEYS, strict)
    return ServiceLevel(name=name, eol=reader.date("eol"))


def parse_rpm_component(name: str, node: Node, path: str, mdversion: int, strict: bool) -> RpmComponent:
    allowed = RPM_COMPONENT_KEYS_V2 if mdversion >= 2 else RPM_COMPONENT_KEYS_V1
    reader = MappingReader(node, path, allowed, strict)
    return RpmComponent(
        name=name,
        rationale=reader.text("rationale"),
        buildorder=reader.integer("buildorder", minimum=INT64_MIN, maximum=INT64_MAX),
        buildafter=reader.string_set("buildafter"),
        repository=reader.text("repository"),
        ref=reader.text("ref"),
        package_name=reader.text("name"),
        cache=reader.text("cache"),
        arches=reader.string_set("arches"),
        multilib=reader.string_set("multilib"),
    )


def parse_module_component(name: str, node: Node, path: str, mdversion: int, strict: bool) -> ModuleComponent:
    allowed = MODULE_COMPONENT_KEYS_V2 if mdversion >= 2 else MODULE_COMPONENT_KEYS_V1
    reader = MappingReader(node, path, allowed, strict)
    return ModuleComponent(
        name=name,
        rationale=reader.text("rationale"),
        buildorder=reader.integer("buildorder", minimum=INT64_MIN, maximum=INT64_MAX),
        buildafter=reader.string_set("buildafter"),
        repository=reader.text("repository"),
        ref=reader.text("ref"),
    )


def _stream_lists(mapping: MappingNode | None, path: str) -> dict[str, set[str]]:
    if mapping is None:
        return {}
    result = {}
    for module_name, streams in mapping.pairs:
        field_path = f"{path}.{module_name}"
        expect(streams, SequenceNode, field_path)
        result[module_name] = string_set(streams, field_path)
    return result


def parse_dependencies(node: Node, path: str, strict: bool) -> Dependencies:
    reader = MappingReader(node, path, DEPENDENCIES_KEYS, strict)
    return Dependencies(
        buildrequires=_stream_lists(reader.mapping("buildrequires"), reader.field_path("buildrequires")),
        requires=_stream_lists(reader.mapping("requires"), reader.field_path("requires")),
    )


def parse_rpm_map_entry(node: Node, path: str, strict: bool) -> RpmMapEntry:
    reader = MappingReader(node, path, RPM_MAP_ENTRY_KEYS, strict)

    values = {}
    for key in ("name", "version", "release", "arch"):
        values[key] = reader.text(key)
        if values[key] is None:
            raise ValidationError(
                f"rpm-map entry '{path}' is missing '{key}'",
                field=reader.field_path(key),
                rule="missing-field",
            )
    entry = RpmMapEntry(epoch=reader.integer("epoch"), **values)

    nevra = reader.text("nevra")
    if nevra is not None and nevra != entry.nevra:
        raise ValidationError(
            f"rpm-map entry nevra {nevra!r} does not match {entry.nevra!r}",
            field=reader.field_path("nevra"),
            rule="nevra-mismatch",
        )
    return entry
