"""
Module Index — every stream and defaults document, grouped by module.

The index owns copies of what is added to it. Each Module keeps its
streams keyed by (stream, version, context, arch) so that re-adding an
identical stream is harmless while a different stream with the same
identity is refused.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import yaml

from modulemd_model.core.reader import Strictness, read_file, read_subdocument
from modulemd_model.core.upgrade import upgrade_stream
from modulemd_model.document.node import Node, compose_documents, emit_documents, to_node
from modulemd_model.errors import DuplicateError, ModulemdError, ParseError, ValidationError
from modulemd_model.exporters.defaults import emit_defaults
from modulemd_model.exporters.stream import emit_stream
from modulemd_model.models.defaults import Defaults
from modulemd_model.models.stream import ModuleStream

logger = logging.getLogger(__name__)

StreamKey = tuple[str, int, str, str]

UNKNOWN_STREAM_PREFIX = "__unknown_"


def _stream_key(stream: ModuleStream) -> StreamKey:
    return (stream.stream_name or "", stream.version, stream.context or "", stream.arch or "")


@dataclass
class SubdocumentFailure:
    """A document that could not be read, by its position in the YAML stream."""

    document_index: int | None
    error: ModulemdError


class Module:
    """All streams of one module, plus its defaults."""

    def __init__(self, module_name: str):
        self.module_name = module_name
        self.streams: dict[StreamKey, ModuleStream] = {}
        self.defaults: Defaults | None = None

    def add_stream(self, stream: ModuleStream) -> bool:
        if stream.module_name != self.module_name:
            raise ValidationError(
                f"Stream of module '{stream.module_name}' added to module '{self.module_name}'",
                field="module_name",
                rule="module-mismatch",
            )
        key = _stream_key(stream)
        existing = self.streams.get(key)
        if existing is not None:
            if existing == stream:
                return False
            raise DuplicateError(
                f"A different stream {stream.nsvca_string()} is already present",
                nsvca=stream.nsvca_string(),
            )
        self.streams[key] = stream.copy()
        return True

    def get_all_streams(self) -> list[ModuleStream]:
        return [self.streams[key] for key in sorted(self.streams)]

    def get_stream_names(self) -> list[str]:
        return sorted({key[0] for key in self.streams})

    def get_stream_by_name(self, stream_name: str) -> ModuleStream | None:
        """The highest version of a stream; ties go to the last in sort order."""
        candidates = [s for key, s in sorted(self.streams.items()) if key[0] == stream_name]
        if not candidates:
            return None
        return max(candidates, key=lambda s: s.version)

    def get_stream_by_nsvca(
        self, stream_name: str, version: int, context: str | None = None, arch: str | None = None
    ) -> ModuleStream | None:
        return self.streams.get((stream_name, version, context or "", arch or ""))

    def search_streams(self, stream_name: str | None = None, version: int | None = None) -> list[ModuleStream]:
        return [
            s
            for s in self.get_all_streams()
            if (stream_name is None or s.stream_name == stream_name) and (version is None or s.version == version)
        ]

    def set_defaults(self, defaults: Defaults | None) -> None:
        if defaults is not None and defaults.module_name != self.module_name:
            logger.warning(
                f"[INDEX] Ignoring defaults for '{defaults.module_name}' set on module '{self.module_name}'"
            )
            return
        self.defaults = defaults.copy() if defaults is not None else None

    def __len__(self) -> int:
        return len(self.streams)


class ModuleIndex:
    """
    Collection of modules keyed by name.

    Streams without a stream name are stored under a generated placeholder
    name (``__unknown_1__``, ``__unknown_2__``, ...). Streams without a
    module name cannot be indexed.
    """

    def __init__(self, strictness: Strictness | None = None):
        self.strictness = Strictness.resolve(strictness)
        self.modules: dict[str, Module] = {}
        self._unknown_streams = 0

    def _module(self, module_name: str) -> Module:
        if module_name not in self.modules:
            self.modules[module_name] = Module(module_name)
        return self.modules[module_name]

    def add_stream(self, stream: ModuleStream) -> bool:
        """Add a copy of ``stream``; False when an identical stream is already present."""
        if not stream.module_name:
            raise ValidationError(
                "Stream has no module name and cannot be indexed",
                field="module_name",
                rule="missing-field",
            )
        module = self._module(stream.module_name)
        if not stream.stream_name:
            # An unnamed stream already stored under a placeholder is a re-add
            for existing in module.streams.values():
                if existing.stream_name.startswith(UNKNOWN_STREAM_PREFIX) and existing == stream.copy(
                    stream_name=existing.stream_name
                ):
                    return False
            self._unknown_streams += 1
            stream = stream.copy(stream_name=f"{UNKNOWN_STREAM_PREFIX}{self._unknown_streams}__")
        return module.add_stream(stream)

    def add_defaults(self, defaults: Defaults) -> None:
        self._module(defaults.module_name).set_defaults(defaults)

    def get_module(self, module_name: str) -> Module | None:
        return self.modules.get(module_name)

    @property
    def module_names(self) -> list[str]:
        return sorted(self.modules)

    def get_default_streams(self) -> dict[str, str]:
        return {
            name: module.defaults.default_stream
            for name, module in sorted(self.modules.items())
            if module.defaults is not None and module.defaults.default_stream
        }

    def upgrade_streams(self, target_version: int) -> None:
        """Replace every stream with its upgraded form; on failure nothing changes."""
        upgraded = {
            name: {key: upgrade_stream(stream, target_version) for key, stream in module.streams.items()}
            for name, module in self.modules.items()
        }
        for name, streams in upgraded.items():
            self.modules[name].streams = streams
        logger.info(f"[INDEX] Upgraded {self.stream_count()} stream(s) to v{target_version}")

    def stream_count(self) -> int:
        return sum(len(module) for module in self.modules.values())

    def _add_document(self, document: ModuleStream | Defaults) -> None:
        if isinstance(document, Defaults):
            self.add_defaults(document)
        else:
            self.add_stream(document)

    def update_from_string(self, text: str | bytes, strictness: Strictness | None = None) -> list[SubdocumentFailure]:
        """
        Add every readable document in ``text``.

        Documents that fail are reported by index and do not affect the
        others. A YAML syntax error ends the stream, so documents after it
        are not read.
        """
        strict = (strictness or self.strictness).strict
        failures: list[SubdocumentFailure] = []
        added = 0

        try:
            for index, yaml_node in compose_documents(text):
                if self._update_from_node(yaml_node, index, strict, failures):
                    added += 1
        except ParseError as e:
            logger.warning(f"[INDEX] Document {e.document_index}: {e}")
            failures.append(SubdocumentFailure(e.document_index, e))

        logger.info(f"[INDEX] Read {added} document(s), {len(failures)} failure(s)")
        return failures

    def _update_from_node(
        self, yaml_node: yaml.Node, index: int, strict: bool, failures: list[SubdocumentFailure]
    ) -> bool:
        try:
            self._add_document(read_subdocument(to_node(yaml_node, index), index, strict))
        except ModulemdError as e:
            logger.warning(f"[INDEX] Document {index}: {e}")
            failures.append(SubdocumentFailure(index, e))
            return False
        return True

    async def update_from_file(self, path: Path | str, strictness: Strictness | None = None) -> list[SubdocumentFailure]:
        return self.update_from_string(await read_file(path), strictness)

    def document_nodes(self) -> list[Node]:
        """Document nodes in dump order: modules by name, defaults before streams."""
        nodes: list[Node] = []
        for name in self.module_names:
            module = self.modules[name]
            if module.defaults is not None:
                nodes.append(emit_defaults(module.defaults))
            nodes.extend(emit_stream(stream) for stream in module.get_all_streams())
        return nodes

    def dump_to_string(self) -> str:
        return emit_documents(self.document_nodes())
