"""
Index Processor — reads many metadata files into one index and exports it.

Files are read concurrently; parsing and indexing happen in order of the
paths given so that duplicate detection is deterministic.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn

from modulemd_model.core.index import ModuleIndex, SubdocumentFailure
from modulemd_model.core.reader import Strictness, read_file
from modulemd_model.exporters.base import Exporter

logger = logging.getLogger(__name__)


@dataclass
class FileReport:
    path: Path
    failures: list[SubdocumentFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


class IndexProcessor:
    """
    Builds a ModuleIndex from files, optionally upgrades it, and hands the
    result to exporters.
    """

    def __init__(
        self,
        exporters: list[Exporter] | None = None,
        strictness: Strictness | None = None,
        target_version: int | None = None,
        console: Console | None = None,
        max_concurrency: int = 8,
    ):
        self.exporters = exporters or []
        self.strictness = Strictness.resolve(strictness)
        self.target_version = target_version
        self.console = console or Console(stderr=True)
        self.max_concurrency = max_concurrency
        self.index = ModuleIndex(self.strictness)
        self.reports: list[FileReport] = []

    async def _read_all(self, paths: list[Path]) -> list[str]:
        sem = asyncio.Semaphore(self.max_concurrency)

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            console=self.console,
            transient=True,
        ) as progress:
            task_id = progress.add_task("[green]Reading...[/green]", total=len(paths))

            async def read_one(path: Path) -> str:
                async with sem:
                    try:
                        return await read_file(path)
                    finally:
                        progress.advance(task_id)

            return await asyncio.gather(*(read_one(p) for p in paths))

    async def run(self, paths: list[Path]) -> ModuleIndex:
        texts = await self._read_all(paths)

        for path, text in zip(paths, texts):
            report = FileReport(path, self.index.update_from_string(text, self.strictness))
            self.reports.append(report)
            for failure in report.failures:
                logger.warning(f"[PROCESS] {path}: document {failure.document_index}: {failure.error}")

        if self.target_version is not None:
            self.index.upgrade_streams(self.target_version)

        for exporter in self.exporters:
            for module_name in self.index.module_names:
                module = self.index.modules[module_name]
                if module.defaults is not None:
                    await exporter.export(module.defaults)
                for stream in module.get_all_streams():
                    await exporter.export(stream)
            await exporter.finalize()

        return self.index

    @property
    def failed(self) -> bool:
        return any(not report.ok for report in self.reports)

    def print_summary(self) -> None:
        total_failures = sum(len(r.failures) for r in self.reports)
        status = "[bold red][FAILED][/bold red]" if self.failed else "[bold green][OK][/bold green]"
        self.console.print(
            f"{status} {len(self.reports)} file(s) | "
            f"{len(self.index.module_names)} module(s) | "
            f"{self.index.stream_count()} stream(s) | "
            f"{total_failures} failure(s)"
        )
        for report in self.reports:
            for failure in report.failures:
                self.console.print(
                    f"  [red]{escape(str(report.path))}[/red] document {failure.document_index}: "
                    f"{escape(str(failure.error))}",
                    highlight=False,
                )
