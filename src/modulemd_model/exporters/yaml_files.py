"""
YAML file exporters.

IndexFileExporter gathers everything into a ModuleIndex and writes one
combined file on finalize(). StreamFileExporter writes one file per
document as it arrives.
"""

from __future__ import annotations

import logging
from pathlib import Path

import aiofiles

from modulemd_model.exporters.defaults import dump_defaults
from modulemd_model.exporters.stream import dump_stream
from modulemd_model.models.defaults import Defaults
from modulemd_model.models.stream import ModuleStream

logger = logging.getLogger(__name__)


class IndexFileExporter:
    """Writes all exported documents to a single index file."""

    def __init__(self, output_path: Path):
        from modulemd_model.core.index import ModuleIndex

        self.output_path = output_path
        self.output_path.parent.mkdir(parents=True, exist_ok=True)
        self.index = ModuleIndex()
        self.count = 0

    async def export(self, document: ModuleStream | Defaults) -> None:
        if isinstance(document, Defaults):
            self.index.add_defaults(document)
        else:
            self.index.add_stream(document)
        self.count += 1

    async def finalize(self) -> None:
        async with aiofiles.open(self.output_path, "w", encoding="utf-8") as f:
            await f.write(self.index.dump_to_string())
        logger.info(f"[YAML] Export complete: {self.count} documents written to {self.output_path}")


class StreamFileExporter:
    """
    Writes each document to its own file in ``output_dir``.

    Streams are named after their NSVCA with ``:`` replaced by ``_``;
    defaults are written as ``<module>.defaults.yaml``.
    """

    def __init__(self, output_dir: Path):
        self.output_dir = output_dir
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.count = 0

    @staticmethod
    def filename_for(document: ModuleStream | Defaults) -> str:
        if isinstance(document, Defaults):
            return f"{document.module_name}.defaults.yaml"
        nsvca = document.nsvca_string() or "unnamed"
        return f"{nsvca.replace(':', '_')}.yaml"

    async def export(self, document: ModuleStream | Defaults) -> None:
        if isinstance(document, Defaults):
            output = dump_defaults(document)
        else:
            output = dump_stream(document)

        filepath = self.output_dir / self.filename_for(document)
        async with aiofiles.open(filepath, "w", encoding="utf-8") as f:
            await f.write(output)

        self.count += 1
        logger.debug(f"[YAML] Exported {filepath.name}")

    async def finalize(self) -> None:
        logger.info(f"[YAML] Export complete: {self.count} documents exported to {self.output_dir}")
