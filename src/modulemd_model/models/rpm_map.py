"""RPM map entries: the package identity behind an artifact checksum."""

from dataclasses import dataclass


@dataclass
class RpmMapEntry:
    name: str
    version: str
    release: str
    arch: str
    epoch: int = 0

    @property
    def nevra(self) -> str:
        return f"{self.name}-{self.epoch}:{self.version}-{self.release}.{self.arch}"

    def copy(self) -> "RpmMapEntry":
        return RpmMapEntry(self.name, self.version, self.release, self.arch, self.epoch)
