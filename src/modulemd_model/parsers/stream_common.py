"""Fields that read the same way in every module stream schema version."""

from __future__ import annotations

from modulemd_model.models.stream import ModuleStream
from modulemd_model.parsers.entities import (
    parse_module_component,
    parse_profile,
    parse_rpm_component,
    parse_servicelevel,
)
from modulemd_model.parsers.fields import MappingReader

COMMON_KEYS = (
    "name",
    "stream",
    "version",
    "context",
    "arch",
    "summary",
    "description",
    "servicelevels",
    "license",
    "xmd",
    "dependencies",
    "references",
    "profiles",
    "api",
    "filter",
    "buildopts",
    "components",
    "artifacts",
)


def read_common_fields(reader: MappingReader, stream: ModuleStream) -> None:
    """Populate identity, descriptive text and the collections shared by v1 and v2."""
    strict = reader.strict
    mdversion = stream.mdversion

    stream.module_name = reader.text("name")
    stream.stream_name = reader.text("stream")
    stream.version = reader.integer("version")
    stream.context = reader.text("context")
    stream.arch = reader.text("arch")
    stream.summary = reader.text("summary")
    stream.description = reader.text("description")

    for name, node in reader.entries("servicelevels"):
        path = f"{reader.field_path('servicelevels')}.{name}"
        stream.servicelevels[name] = parse_servicelevel(name, node, path, strict)

    license_reader = reader.child("license", ("module", "content"))
    if license_reader is not None:
        stream.module_licenses = license_reader.string_set("module")
        stream.content_licenses = license_reader.string_set("content")

    xmd = reader.mapping("xmd")
    if xmd is not None:
        stream.xmd = xmd

    references = reader.child("references", ("community", "documentation", "tracker"))
    if references is not None:
        stream.community = references.text("community")
        stream.documentation = references.text("documentation")
        stream.tracker = references.text("tracker")

    for name, node in reader.entries("profiles"):
        path = f"{reader.field_path('profiles')}.{name}"
        stream.profiles[name] = parse_profile(name, node, path, strict)

    api = reader.child("api", ("rpms",))
    if api is not None:
        stream.rpm_api = api.string_set("rpms")

    filters = reader.child("filter", ("rpms",))
    if filters is not None:
        stream.rpm_filters = filters.string_set("rpms")

    components = reader.child("components", ("rpms", "modules"))
    if components is not None:
        for name, node in components.entries("rpms"):
            path = f"{components.field_path('rpms')}.{name}"
            stream.rpm_components[name] = parse_rpm_component(name, node, path, mdversion, strict)
        for name, node in components.entries("modules"):
            path = f"{components.field_path('modules')}.{name}"
            stream.module_components[name] = parse_module_component(name, node, path, mdversion, strict)
