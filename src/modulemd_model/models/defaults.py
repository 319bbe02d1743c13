"""
Module defaults — the ``modulemd-defaults`` document.

Names the stream a module resolves to when none is requested, and which
profiles are installed by default for each stream.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class Defaults:
    module_name: str
    default_stream: str | None = None
    profiles: dict[str, set[str]] = field(default_factory=dict)

    mdversion: int = 1

    def add_default_profile(self, stream_name: str, profile_name: str) -> None:
        self.profiles.setdefault(stream_name, set()).add(profile_name)

    def get_default_profiles(self, stream_name: str) -> list[str] | None:
        profiles = self.profiles.get(stream_name)
        return sorted(profiles) if profiles is not None else None

    def copy(self) -> Defaults:
        return Defaults(
            self.module_name,
            self.default_stream,
            {stream: set(names) for stream, names in self.profiles.items()},
            self.mdversion,
        )
