"""logical-file command-line interface."""

from __future__ import annotations

import sys
from pathlib import Path

import click
from loguru import logger

from logical_file import __version__
from logical_file.config import LogicalFileConfig, default_config, find_config, load_config
from logical_file.errors import DiagnosticRenderer, LogicalFileError
from logical_file.logical_file import LogicalFile


def setup_logging(verbose: bool = False) -> None:
    logger.remove()
    logger.add(
        sys.stderr,
        level="DEBUG" if verbose else "WARNING",
        format="<level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
    )
    logger.enable("logical_file")


def _config_for(source: Path, config_path: str | None) -> LogicalFileConfig:
    if config_path is not None:
        return load_config(Path(config_path))
    try:
        return load_config(find_config(source))
    except FileNotFoundError:
        logger.debug("no config found above {}, using defaults", source)
        return default_config(source)


def _load(ctx: click.Context, file: str) -> LogicalFile:
    """Read and process *file*, exiting with rendered diagnostics on failure."""
    source = Path(file)
    try:
        config = _config_for(source, ctx.obj.get("config"))
        return LogicalFile.read(
            config.document.base_path, source.resolve(), config.invocations(),
        )
    except LogicalFileError as e:
        renderer = DiagnosticRenderer(color=ctx.obj.get("color", True))
        click.echo(renderer.render(e.to_diagnostic()), err=True)
        raise SystemExit(1)


@click.group()
@click.version_option(__version__, prog_name="logical-file")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.option("--config", "config_path", type=click.Path(exists=True, dir_okay=False),
              help="Use this config file instead of searching for logical_file.toml.")
@click.option("--no-color", is_flag=True, help="Render diagnostics without ANSI colors.")
@click.pass_context
def main(ctx: click.Context, verbose: bool, config_path: str | None, no_color: bool) -> None:
    """Assemble logical files from many sources and map lines back to them."""
    setup_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["config"] = config_path
    ctx.obj["color"] = not no_color


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--line-numbers", "-n", is_flag=True, help="Prefix lines with their origin.")
@click.pass_context
def render(ctx: click.Context, file: str, line_numbers: bool) -> None:
    """Print the processed document."""
    logical = _load(ctx, file)
    if not line_numbers:
        click.echo(str(logical))
        return
    width = len(str(logical.last_line_number()))
    for lno, line in enumerate(logical.lines(), start=1):
        click.echo(f"{lno:>{width}} {logical.resolve_line(lno)} | {line}")


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.argument("line", type=int)
@click.pass_context
def resolve(ctx: click.Context, file: str, line: int) -> None:
    """Print the file and local line behind logical LINE."""
    logical = _load(ctx, file)
    try:
        click.echo(str(logical.resolve_line(line)))
    except LogicalFileError as e:
        click.echo(f"error: {e}", err=True)
        raise SystemExit(1)


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def sections(ctx: click.Context, file: str) -> None:
    """List the sections backing the processed document."""
    logical = _load(ctx, file)
    for section in logical.sections_in_order():
        click.echo(f"{str(section.range):<12} {section.offset:>6}  {section.source_path}")
