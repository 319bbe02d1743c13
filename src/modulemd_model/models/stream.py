"""
Module Stream — the common contract shared by every schema version.

A stream is one variant of a module (for example ``nodejs:18``). The
fields here exist in both v1 and v2 documents; the version specific
classes in ``stream_v1`` and ``stream_v2`` add what only their schema
carries. Streams own everything nested in them: adders store copies and
``copy()`` is deep, so two streams never share mutable state.
"""

from __future__ import annotations

import copy as _copy
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, ClassVar

from modulemd_model.document.node import MappingNode, node_from_python
from modulemd_model.errors import ValidationError
from modulemd_model.models.component import Component, ModuleComponent, RpmComponent
from modulemd_model.models.profile import Profile
from modulemd_model.models.service_level import ServiceLevel

logger = logging.getLogger(__name__)

UINT64_MAX = 2**64 - 1

TEXT_FIELDS = frozenset(
    {
        "module_name",
        "stream_name",
        "context",
        "arch",
        "summary",
        "description",
        "community",
        "documentation",
        "tracker",
    }
)


@dataclass
class ModuleStream(ABC):
    mdversion: ClassVar[int] = 0

    module_name: str | None = None
    stream_name: str | None = None
    version: int = 0
    context: str | None = None
    arch: str | None = None
    summary: str | None = None
    description: str | None = None
    community: str | None = None
    documentation: str | None = None
    tracker: str | None = None

    module_licenses: set[str] = field(default_factory=set)
    content_licenses: set[str] = field(default_factory=set)
    rpm_api: set[str] = field(default_factory=set)
    rpm_filters: set[str] = field(default_factory=set)
    rpm_artifacts: set[str] = field(default_factory=set)

    profiles: dict[str, Profile] = field(default_factory=dict)
    servicelevels: dict[str, ServiceLevel] = field(default_factory=dict)
    rpm_components: dict[str, RpmComponent] = field(default_factory=dict)
    module_components: dict[str, ModuleComponent] = field(default_factory=dict)

    xmd: MappingNode | None = None

    def __setattr__(self, name: str, value: Any) -> None:
        if name in TEXT_FIELDS and value == "":
            value = None
        elif name == "version":
            if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= UINT64_MAX:
                raise ValueError(f"Stream version must be an unsigned 64-bit integer, got {value!r}")
        super().__setattr__(name, value)

    @staticmethod
    def new(mdversion: int, module_name: str | None = None, stream_name: str | None = None) -> ModuleStream:
        """Create an empty stream of the given schema version."""
        from modulemd_model.models.stream_v1 import ModuleStreamV1
        from modulemd_model.models.stream_v2 import ModuleStreamV2

        match mdversion:
            case 1:
                return ModuleStreamV1(module_name=module_name, stream_name=stream_name)
            case 2:
                return ModuleStreamV2(module_name=module_name, stream_name=stream_name)
            case _:
                raise ValueError(f"Unsupported module stream mdversion: {mdversion!r}")

    # ═══════════════════════════════════════════
    # Identity
    # ═══════════════════════════════════════════

    def nsvc_string(self) -> str | None:
        """
        ``name:stream:version[:context]``, or None without name and stream.

        The version is always shown (``0`` when unset); the context segment
        is appended only when a context is set.
        """
        if not self.module_name or not self.stream_name:
            return None
        nsvc = f"{self.module_name}:{self.stream_name}:{self.version}"
        if self.context:
            nsvc = f"{nsvc}:{self.context}"
        return nsvc

    def nsvca_string(self) -> str | None:
        """
        ``name:stream:version:context:arch`` with empty segments for unset
        fields and trailing empty segments dropped. An unset version (0) is
        an empty segment. None without a module name.
        """
        if not self.module_name:
            return None
        segments = [
            self.module_name,
            self.stream_name or "",
            str(self.version) if self.version else "",
            self.context or "",
            self.arch or "",
        ]
        while segments and not segments[-1]:
            segments.pop()
        return ":".join(segments)

    # ═══════════════════════════════════════════
    # Set-valued fields
    # ═══════════════════════════════════════════

    def add_module_license(self, license_name: str) -> None:
        self.module_licenses.add(license_name)

    def remove_module_license(self, license_name: str) -> None:
        self.module_licenses.discard(license_name)

    def get_module_licenses(self) -> list[str]:
        return sorted(self.module_licenses)

    def add_content_license(self, license_name: str) -> None:
        self.content_licenses.add(license_name)

    def remove_content_license(self, license_name: str) -> None:
        self.content_licenses.discard(license_name)

    def get_content_licenses(self) -> list[str]:
        return sorted(self.content_licenses)

    def add_rpm_api(self, rpm: str) -> None:
        self.rpm_api.add(rpm)

    def remove_rpm_api(self, rpm: str) -> None:
        self.rpm_api.discard(rpm)

    def get_rpm_api(self) -> list[str]:
        return sorted(self.rpm_api)

    def add_rpm_filter(self, rpm: str) -> None:
        self.rpm_filters.add(rpm)

    def remove_rpm_filter(self, rpm: str) -> None:
        self.rpm_filters.discard(rpm)

    def get_rpm_filters(self) -> list[str]:
        return sorted(self.rpm_filters)

    def add_rpm_artifact(self, nevra: str) -> None:
        self.rpm_artifacts.add(nevra)

    def remove_rpm_artifact(self, nevra: str) -> None:
        self.rpm_artifacts.discard(nevra)

    def get_rpm_artifacts(self) -> list[str]:
        return sorted(self.rpm_artifacts)

    # ═══════════════════════════════════════════
    # Owned entities
    # ═══════════════════════════════════════════

    def add_profile(self, profile: Profile) -> None:
        self.profiles[profile.name] = profile.copy()

    def get_profile(self, name: str) -> Profile | None:
        return self.profiles.get(name)

    def remove_profile(self, name: str) -> None:
        self.profiles.pop(name, None)

    def get_profile_names(self) -> list[str]:
        return sorted(self.profiles)

    def add_servicelevel(self, servicelevel: ServiceLevel) -> None:
        self.servicelevels[servicelevel.name] = servicelevel.copy()

    def get_servicelevel(self, name: str) -> ServiceLevel | None:
        return self.servicelevels.get(name)

    def get_servicelevel_names(self) -> list[str]:
        return sorted(self.servicelevels)

    def add_component(self, component: Component) -> None:
        if isinstance(component, RpmComponent):
            self.rpm_components[component.name] = component.copy()
        elif isinstance(component, ModuleComponent):
            self.module_components[component.name] = component.copy()
        else:
            raise TypeError(f"Not a stream component: {type(component).__name__}")

    def get_rpm_component(self, name: str) -> RpmComponent | None:
        return self.rpm_components.get(name)

    def get_module_component(self, name: str) -> ModuleComponent | None:
        return self.module_components.get(name)

    def remove_rpm_component(self, name: str) -> None:
        self.rpm_components.pop(name, None)

    def remove_module_component(self, name: str) -> None:
        self.module_components.pop(name, None)

    def get_rpm_component_names(self) -> list[str]:
        return sorted(self.rpm_components)

    def get_module_component_names(self) -> list[str]:
        return sorted(self.module_components)

    def get_xmd(self) -> dict | None:
        """The extensible metadata as plain Python data."""
        return self.xmd.to_python() if self.xmd is not None else None

    def set_xmd(self, value: dict | MappingNode | None) -> None:
        if value is None:
            self.xmd = None
            return
        node = node_from_python(value)
        if not isinstance(node, MappingNode):
            raise TypeError("xmd must be a mapping")
        self.xmd = node

    # ═══════════════════════════════════════════
    # Contract
    # ═══════════════════════════════════════════

    def copy(self, module_name: str | None = None, stream_name: str | None = None) -> ModuleStream:
        """Deep copy, optionally renaming the module and/or the stream."""
        clone = _copy.deepcopy(self)
        if module_name:
            clone.module_name = module_name
        if stream_name:
            clone.stream_name = stream_name
        return clone

    def equals(self, other: object) -> bool:
        return self == other

    @abstractmethod
    def depends_on_stream(self, module_name: str, stream_name: str) -> bool:
        """True when the stream requires ``module_name:stream_name`` at run time."""

    @abstractmethod
    def build_depends_on_stream(self, module_name: str, stream_name: str) -> bool:
        """True when the stream requires ``module_name:stream_name`` to build."""

    def upgrade(self, target_version: int) -> ModuleStream:
        from modulemd_model.core.upgrade import upgrade_stream

        return upgrade_stream(self, target_version)

    def validate(self) -> None:
        """Check the build ordering rules across all components."""
        components: list[Component] = [*self.rpm_components.values(), *self.module_components.values()]
        known = set(self.rpm_components) | set(self.module_components)

        for component in components:
            if component.buildorder and component.buildafter:
                raise ValidationError(
                    f"Component '{component.name}' sets both buildorder and buildafter",
                    field=f"components.{component.name}",
                    rule="buildorder-with-buildafter",
                    components=(component.name,),
                )

        with_buildafter = sorted(c.name for c in components if c.buildafter)
        with_buildorder = sorted(c.name for c in components if c.buildorder)
        if with_buildafter and with_buildorder:
            raise ValidationError(
                "Stream mixes buildafter and buildorder: "
                f"buildafter on {', '.join(with_buildafter)}; buildorder on {', '.join(with_buildorder)}",
                field="components",
                rule="mixed-build-ordering",
                components=tuple(with_buildafter + with_buildorder),
            )

        for component in components:
            missing = sorted(component.buildafter - known)
            if missing:
                raise ValidationError(
                    f"Component '{component.name}' builds after unknown component(s): {', '.join(missing)}",
                    field=f"components.{component.name}.buildafter",
                    rule="unknown-buildafter",
                    components=(component.name, *missing),
                )

        logger.debug(f"[MMD-VALIDATE] {self.nsvca_string() or '<unnamed>'} passed component checks")
