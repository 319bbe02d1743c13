"""Stream-wide build options."""

from dataclasses import dataclass, field


@dataclass
class BuildOpts:
    rpm_macros: str | None = None
    rpm_whitelist: set[str] = field(default_factory=set)
    arches: set[str] = field(default_factory=set)

    def is_empty(self) -> bool:
        return not (self.rpm_macros or self.rpm_whitelist or self.arches)

    def copy(self) -> "BuildOpts":
        return BuildOpts(self.rpm_macros, set(self.rpm_whitelist), set(self.arches))
