"""
modulemd-model CLI — validate, normalize and upgrade module metadata files.

Usage:
    modulemd-model validate foo.yaml bar.yaml
    modulemd-model dump modules.yaml --permissive
    modulemd-model dump modules.yaml --format streams --output ./out
    modulemd-model upgrade old-v1.yaml --to 2 --output modules-v2.yaml
"""

import asyncio
import logging
import sys

import click


def _configure_logging(verbose: bool) -> None:
    log_level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def _process(paths, permissive, verbose, fmt=None, output=None, target_version=None):
    from pathlib import Path

    from modulemd_model.core.processor import IndexProcessor
    from modulemd_model.core.reader import Strictness
    from modulemd_model.exporters import get_exporter

    _configure_logging(verbose)

    exporters = [get_exporter(fmt, output)] if output else []
    processor = IndexProcessor(
        exporters=exporters,
        strictness=Strictness.PERMISSIVE if permissive else None,
        target_version=target_version,
    )
    index = asyncio.run(processor.run([Path(p) for p in paths]))
    return processor, index


@click.group()
@click.version_option(package_name="modulemd-model")
def cli():
    """modulemd-model — module stream metadata toolkit."""
    pass


@cli.command()
@click.argument("paths", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
@click.option("--permissive", is_flag=True, help="Ignore unknown keys instead of failing.")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging.")
def validate(paths, permissive, verbose):
    """Check that every document in PATHS parses and validates."""
    processor, _ = _process(paths, permissive, verbose)
    processor.print_summary()
    if processor.failed:
        sys.exit(1)


@cli.command()
@click.argument("paths", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--format",
    "-f",
    "fmt",
    type=click.Choice(["index", "streams"]),
    default="index",
    help="One combined file, or one file per document.",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(),
    default=None,
    help="Output file (index) or directory (streams). Defaults to stdout.",
)
@click.option("--permissive", is_flag=True, help="Ignore unknown keys instead of failing.")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging.")
def dump(paths, fmt, output, permissive, verbose):
    """Re-emit PATHS as canonical YAML."""
    processor, index = _process(paths, permissive, verbose, fmt, output)
    if output is None:
        click.echo(index.dump_to_string(), nl=False)
    if processor.failed:
        processor.print_summary()
        sys.exit(1)


@cli.command()
@click.argument("paths", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
@click.option("--to", "target_version", type=click.IntRange(1, 2), default=2, help="Target schema version.")
@click.option(
    "--format",
    "-f",
    "fmt",
    type=click.Choice(["index", "streams"]),
    default="index",
    help="One combined file, or one file per document.",
)
@click.option("--output", "-o", type=click.Path(), default=None, help="Output path. Defaults to stdout.")
@click.option("--permissive", is_flag=True, help="Ignore unknown keys instead of failing.")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging.")
def upgrade(paths, target_version, fmt, output, permissive, verbose):
    """Upgrade every stream in PATHS to a newer schema version."""
    from modulemd_model.errors import UpgradeError

    try:
        processor, index = _process(paths, permissive, verbose, fmt, output, target_version)
    except UpgradeError as e:
        raise click.ClickException(str(e)) from e
    if output is None:
        click.echo(index.dump_to_string(), nl=False)
    if processor.failed:
        processor.print_summary()
        sys.exit(1)


if __name__ == "__main__":
    cli()
