"""Canonical YAML emission and file export backends."""

from modulemd_model.exporters.base import Exporter
from modulemd_model.exporters.defaults import dump_defaults, emit_defaults
from modulemd_model.exporters.stream import dump_stream, emit_stream
from modulemd_model.exporters.yaml_files import IndexFileExporter, StreamFileExporter


def get_exporter(format_name: str, output: str) -> Exporter:
    """Factory function to create an exporter by format name."""
    from pathlib import Path

    out = Path(output)
    match format_name:
        case "index":
            return IndexFileExporter(output_path=out)
        case "streams":
            return StreamFileExporter(output_dir=out)
        case _:
            raise ValueError(f"Unknown export format: {format_name!r}. Use 'index' or 'streams'.")


__all__ = [
    "Exporter",
    "IndexFileExporter",
    "StreamFileExporter",
    "dump_defaults",
    "dump_stream",
    "emit_defaults",
    "emit_stream",
    "get_exporter",
]
