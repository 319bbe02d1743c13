"""
Dependencies — one alternative set of build and runtime module requirements.

Each side maps a module name to the streams that satisfy it. A stream
prefixed with ``-`` excludes that stream; an empty set means "any stream".
"""

from __future__ import annotations

from dataclasses import dataclass, field

NEGATION_PREFIX = "-"


@dataclass
class Dependencies:
    buildrequires: dict[str, set[str]] = field(default_factory=dict)
    requires: dict[str, set[str]] = field(default_factory=dict)

    def add_buildtime_stream(self, module_name: str, stream_name: str) -> None:
        self.buildrequires.setdefault(module_name, set()).add(stream_name)

    def add_runtime_stream(self, module_name: str, stream_name: str) -> None:
        self.requires.setdefault(module_name, set()).add(stream_name)

    def set_empty_buildtime_dependencies_for_module(self, module_name: str) -> None:
        self.buildrequires[module_name] = set()

    def set_empty_runtime_dependencies_for_module(self, module_name: str) -> None:
        self.requires[module_name] = set()

    def get_buildtime_modules(self) -> list[str]:
        return sorted(self.buildrequires)

    def get_runtime_modules(self) -> list[str]:
        return sorted(self.requires)

    def get_buildtime_streams(self, module_name: str) -> list[str] | None:
        streams = self.buildrequires.get(module_name)
        return sorted(streams) if streams is not None else None

    def get_runtime_streams(self, module_name: str) -> list[str] | None:
        streams = self.requires.get(module_name)
        return sorted(streams) if streams is not None else None

    def requires_module_and_stream(self, module_name: str, stream_name: str) -> bool:
        return _names_stream(self.requires, module_name, stream_name)

    def buildrequires_module_and_stream(self, module_name: str, stream_name: str) -> bool:
        return _names_stream(self.buildrequires, module_name, stream_name)

    def copy(self) -> Dependencies:
        return Dependencies(
            buildrequires={k: set(v) for k, v in self.buildrequires.items()},
            requires={k: set(v) for k, v in self.requires.items()},
        )


def _names_stream(requirements: dict[str, set[str]], module_name: str, stream_name: str) -> bool:
    # Negated entries never satisfy a lookup
    if stream_name.startswith(NEGATION_PREFIX):
        return False
    return stream_name in requirements.get(module_name, ())
