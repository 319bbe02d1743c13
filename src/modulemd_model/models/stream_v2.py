"""
Module stream, schema version 2.

Dependencies become an ordered list of alternative requirement sets, the
artifacts gain a checksum-to-package map, and build options may restrict
the architectures the whole stream builds for.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar

from modulemd_model.errors import ValidationError
from modulemd_model.models.buildopts import BuildOpts
from modulemd_model.models.dependencies import Dependencies
from modulemd_model.models.rpm_map import RpmMapEntry
from modulemd_model.models.stream import ModuleStream


@dataclass
class ModuleStreamV2(ModuleStream):
    mdversion: ClassVar[int] = 2

    dependencies: list[Dependencies] = field(default_factory=list)
    # checksum type -> checksum value -> entry
    rpm_artifact_map: dict[str, dict[str, RpmMapEntry]] = field(default_factory=dict)
    buildopts: BuildOpts = field(default_factory=BuildOpts)

    def add_dependencies(self, deps: Dependencies) -> None:
        self.dependencies.append(deps.copy())

    def remove_dependencies(self, deps: Dependencies) -> None:
        """Remove the first dependency set equal to ``deps``."""
        for i, existing in enumerate(self.dependencies):
            if existing == deps:
                del self.dependencies[i]
                return

    def clear_dependencies(self) -> None:
        self.dependencies.clear()

    def set_rpm_artifact_map_entry(self, entry: RpmMapEntry, checksum_type: str, checksum: str) -> None:
        self.rpm_artifact_map.setdefault(checksum_type, {})[checksum] = entry.copy()

    def get_rpm_artifact_map_entry(self, checksum_type: str, checksum: str) -> RpmMapEntry | None:
        return self.rpm_artifact_map.get(checksum_type, {}).get(checksum)

    def depends_on_stream(self, module_name: str, stream_name: str) -> bool:
        return any(d.requires_module_and_stream(module_name, stream_name) for d in self.dependencies)

    def build_depends_on_stream(self, module_name: str, stream_name: str) -> bool:
        return any(d.buildrequires_module_and_stream(module_name, stream_name) for d in self.dependencies)

    def validate(self) -> None:
        super().validate()

        if not self.buildopts.arches:
            return
        for name, component in sorted(self.rpm_components.items()):
            extra = sorted(component.arches - self.buildopts.arches)
            if extra:
                raise ValidationError(
                    f"Component '{name}' arches {', '.join(extra)} are not in the module build arches",
                    field=f"components.rpms.{name}.arches",
                    rule="arches-not-subset",
                    components=(name,),
                )
