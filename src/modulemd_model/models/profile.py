"""Install profiles: named sets of RPMs installed together."""

from dataclasses import dataclass, field


@dataclass
class Profile:
    name: str
    description: str | None = None
    rpms: set[str] = field(default_factory=set)

    def add_rpm(self, rpm: str) -> None:
        self.rpms.add(rpm)

    def remove_rpm(self, rpm: str) -> None:
        self.rpms.discard(rpm)

    def get_rpms(self) -> list[str]:
        return sorted(self.rpms)

    def copy(self) -> "Profile":
        return Profile(self.name, self.description, set(self.rpms))
