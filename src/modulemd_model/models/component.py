"""
Build components of a module stream.

A stream lists the RPM packages and the other modules that make it up.
Components are built in sequence, either by numeric ``buildorder`` (all
components with the same number build together) or by naming the
components they must follow in ``buildafter``. A stream uses one scheme or
the other, never both.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field


@dataclass
class Component(ABC):
    name: str
    rationale: str | None = None
    buildorder: int = 0
    buildafter: set[str] = field(default_factory=set)
    repository: str | None = None
    ref: str | None = None

    def add_buildafter(self, name: str) -> None:
        self.buildafter.add(name)

    def get_buildafter(self) -> list[str]:
        return sorted(self.buildafter)

    @abstractmethod
    def copy(self, name: str | None = None) -> Component:
        """Independent copy, optionally under a new name."""


@dataclass
class RpmComponent(Component):
    package_name: str | None = None  # override of the SRPM name; emitted as "name"
    cache: str | None = None
    arches: set[str] = field(default_factory=set)
    multilib: set[str] = field(default_factory=set)

    def add_restricted_arch(self, arch: str) -> None:
        self.arches.add(arch)

    def add_multilib_arch(self, arch: str) -> None:
        self.multilib.add(arch)

    def copy(self, name: str | None = None) -> RpmComponent:
        return RpmComponent(
            name=name or self.name,
            rationale=self.rationale,
            buildorder=self.buildorder,
            buildafter=set(self.buildafter),
            repository=self.repository,
            ref=self.ref,
            package_name=self.package_name,
            cache=self.cache,
            arches=set(self.arches),
            multilib=set(self.multilib),
        )


@dataclass
class ModuleComponent(Component):
    def copy(self, name: str | None = None) -> ModuleComponent:
        return ModuleComponent(
            name=name or self.name,
            rationale=self.rationale,
            buildorder=self.buildorder,
            buildafter=set(self.buildafter),
            repository=self.repository,
            ref=self.ref,
        )
