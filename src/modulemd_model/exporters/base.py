"""
Exporter Protocol — Base interface for YAML output sinks.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from modulemd_model.models.defaults import Defaults
from modulemd_model.models.stream import ModuleStream


@runtime_checkable
class Exporter(Protocol):
    """
    Protocol that all exporters must implement.

    Exporters receive validated streams and defaults and write them out
    as canonical YAML, either one file per document or one combined file.
    """

    async def export(self, document: ModuleStream | Defaults) -> None:
        """Accept a single stream or defaults document."""
        ...

    async def finalize(self) -> None:
        """Called after all documents have been exported. Use for flushing."""
        ...
