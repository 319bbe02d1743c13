"""Module stream, schema version 1: a single requirement map per side."""

from __future__ import annotations

import datetime
from dataclasses import dataclass, field
from typing import ClassVar

from modulemd_model.models.buildopts import BuildOpts
from modulemd_model.models.stream import ModuleStream


@dataclass
class ModuleStreamV1(ModuleStream):
    mdversion: ClassVar[int] = 1

    buildtime_requirements: dict[str, str] = field(default_factory=dict)
    runtime_requirements: dict[str, str] = field(default_factory=dict)
    eol: datetime.date | None = None  # superseded by servicelevels
    buildopts: BuildOpts = field(default_factory=BuildOpts)

    def add_buildtime_requirement(self, module_name: str, stream_name: str) -> None:
        self.buildtime_requirements[module_name] = stream_name

    def remove_buildtime_requirement(self, module_name: str) -> None:
        self.buildtime_requirements.pop(module_name, None)

    def add_runtime_requirement(self, module_name: str, stream_name: str) -> None:
        self.runtime_requirements[module_name] = stream_name

    def remove_runtime_requirement(self, module_name: str) -> None:
        self.runtime_requirements.pop(module_name, None)

    def depends_on_stream(self, module_name: str, stream_name: str) -> bool:
        return self.runtime_requirements.get(module_name) == stream_name

    def build_depends_on_stream(self, module_name: str, stream_name: str) -> bool:
        return self.buildtime_requirements.get(module_name) == stream_name
