"""
Example: Upgrade a directory of v1 module metadata to v2.

Usage:
    python examples/upgrade_to_v2.py ./modules ./modules-v2
"""

import asyncio
import sys
from pathlib import Path

from modulemd_model.core.processor import IndexProcessor
from modulemd_model.exporters.yaml_files import StreamFileExporter


async def main(source_dir: Path, output_dir: Path):
    # One output file per stream
    exporter = StreamFileExporter(output_dir=output_dir)

    processor = IndexProcessor(exporters=[exporter], target_version=2)
    await processor.run(sorted(source_dir.glob("*.yaml")))
    processor.print_summary()

    print(f"\nUpgraded documents written to: {output_dir.absolute()}")


if __name__ == "__main__":
    asyncio.run(main(Path(sys.argv[1]), Path(sys.argv[2])))
