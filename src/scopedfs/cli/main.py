"""
CLI for scopedfs.

A small command-line front end over ScopedFileSystem, handy for checking
what a compliance rule would see in a repository checkout.
"""

import asyncio
import logging
import sys
from typing import NoReturn, Optional

import click
from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from scopedfs import __version__
from scopedfs.filesystem.accessor import ScopedFileSystem
from scopedfs.filesystem.config import FileSystemConfig
from scopedfs.filesystem.exceptions import FileSystemError

# Load environment variables
load_dotenv()

console = Console()
err_console = Console(stderr=True)


def setup_logging(verbose: bool = False) -> None:
    """Setup rich logging."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, rich_tracebacks=True)],
    )


def build_config(
    root: Optional[str], filters: tuple[str, ...], config_path: Optional[str]
) -> FileSystemConfig:
    """
    Merge the config file (or SCOPEDFS_* environment) with CLI overrides.
    """
    if config_path:
        config = FileSystemConfig.from_file(config_path)
    else:
        config = FileSystemConfig.from_env()

    overrides = {}
    if root is not None:
        overrides["target_dir"] = root
    if filters:
        overrides["filter_paths"] = list(filters)

    if overrides:
        config = FileSystemConfig(**{**config.model_dump(), **overrides})
    return config


def _fail(message: str) -> NoReturn:
    err_console.print(f"[bold red]Error:[/bold red] {escape(message)}", highlight=False)
    sys.exit(1)


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--root",
    "-r",
    default=None,
    help="Root directory (default: SCOPEDFS_TARGET_DIR or current directory)",
)
@click.option(
    "--filter",
    "-f",
    "filters",
    multiple=True,
    help="Visible path prefix; repeat for several",
)
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Path to a YAML or JSON config file",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(
    ctx: click.Context,
    root: Optional[str],
    filters: tuple[str, ...],
    config_path: Optional[str],
    verbose: bool,
):
    """scopedfs CLI - inspect a repository through a scoped file accessor."""
    setup_logging(verbose)

    try:
        config = build_config(root, filters, config_path)
    except (FileSystemError, ValueError) as e:
        raise click.ClickException(str(e))

    ctx.obj = ScopedFileSystem.from_config(config)


@cli.command()
@click.argument("patterns", nargs=-1, required=True)
@click.option(
    "--files-only",
    is_flag=True,
    help="Only report files (directories and symlinks are skipped)",
)
@click.option("--first", is_flag=True, help="Only report the first match")
@click.option("--nocase", "-i", is_flag=True, help="Ignore case when matching")
@click.pass_obj
def find(
    fs: ScopedFileSystem,
    patterns: tuple[str, ...],
    files_only: bool,
    first: bool,
    nocase: bool,
):
    """
    Find paths matching glob patterns.

    Examples:

        scopedfs find "**/*.md"

        scopedfs -f docs find --files-only "**/*"

        scopedfs find --first -i "LICENSE*" "COPYING*"
    """
    try:
        if first:
            finder = fs.find_first_file if files_only else fs.find_first
            match = asyncio.run(finder(list(patterns), nocase))
            matches = [match] if match is not None else []
        else:
            finder = fs.find_all_files if files_only else fs.find_all
            matches = asyncio.run(finder(list(patterns), nocase))
    except FileSystemError as e:
        _fail(str(e))

    if not matches:
        _fail("No matching paths")

    for path in matches:
        click.echo(path)


@cli.command()
@click.argument("path")
@click.pass_obj
def cat(fs: ScopedFileSystem, path: str):
    """Print the contents of a file."""
    contents = asyncio.run(fs.get_file_contents(path))
    if contents is None:
        _fail(f"Cannot read {path}")
    click.echo(contents, nl=False)


@cli.command()
@click.argument("path")
@click.option(
    "--lines",
    "-n",
    type=click.IntRange(min=1),
    default=10,
    help="Number of lines to print (default: 10)",
)
@click.pass_obj
def head(fs: ScopedFileSystem, path: str, lines: int):
    """Print the first lines of a file."""
    try:
        text = asyncio.run(fs.get_file_lines(path, lines))
    except OSError as e:
        _fail(f"Cannot read {path}: {e}")

    if text is None:
        _fail(f"File not found: {path}")
    click.echo(text, nl=False)


@cli.command()
@click.argument("path")
@click.pass_obj
def exists(fs: ScopedFileSystem, path: str):
    """Check whether a path exists under the root."""
    if asyncio.run(fs.relative_file_exists(path)):
        console.print(f"[green]{escape(path)} exists[/green]", highlight=False)
    else:
        _fail(f"{path} does not exist")


@cli.command("is-binary")
@click.argument("path")
@click.pass_obj
def is_binary(fs: ScopedFileSystem, path: str):
    """Report whether a file looks binary (exit status 1 if not)."""
    try:
        result = asyncio.run(fs.is_binary_file(path))
    except OSError as e:
        _fail(f"Cannot inspect {path}: {e}")

    if result:
        console.print(f"{escape(path)}: binary", highlight=False)
    else:
        console.print(f"{escape(path)}: text", highlight=False)
        sys.exit(1)


if __name__ == "__main__":
    cli()
