"""CLI interface for Folio.

Command-line tool for serving pages and maintaining the page cache.
"""

import logging
import sys
from pathlib import Path

import click

from folio.config import Config
from folio.core.cache import FileCache
from folio.core.tree import load_tree
from folio.errors import IntegrityError

CONFIG_OPTION_HELP = "Path to configuration file (default: auto-discover folio.toml)"


def _load_config(config_path: Path | None) -> Config:
    try:
        return Config.load(config_path)
    except (FileNotFoundError, ValueError) as e:
        raise click.ClickException(str(e)) from e


@click.group()
def cli() -> None:
    """Folio - page resolution and full-page caching for CMS sites."""


@click.group()
def cache() -> None:
    """Full-page cache commands."""


@click.group()
def pages() -> None:
    """Page tree commands."""


cli.add_command(cache)
cli.add_command(pages)


@cli.command()
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help=CONFIG_OPTION_HELP,
)
@click.option(
    "--pages-file",
    type=click.Path(exists=True, path_type=Path, dir_okay=False),
    default=None,
    help="Pages JSON file (overrides config)",
)
@click.option(
    "--cache-dir",
    type=click.Path(path_type=Path, file_okay=False),
    default=None,
    help="Cache directory (overrides config)",
)
@click.option(
    "--host",
    default=None,
    help="Host to bind to (overrides config)",
)
@click.option(
    "--port",
    "-p",
    type=int,
    default=None,
    help="Port to bind to (overrides config)",
)
@click.option(
    "--cache/--no-cache",
    "cache_pages_full",
    default=None,
    help="Enable/disable full-page caching (overrides config)",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output (debug logging)",
)
def serve(
    config_path: Path | None,
    pages_file: Path | None,
    cache_dir: Path | None,
    host: str | None,
    port: int | None,
    cache_pages_full: bool | None,
    verbose: bool,
) -> None:
    """Start the page server."""
    from folio.server import run_server

    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO)

    config = _load_config(config_path).with_overrides(
        host=host,
        port=port,
        pages_file=pages_file,
        cache_dir=cache_dir,
        cache_pages_full=cache_pages_full,
    )

    click.echo(f"Starting server on {config.server.host}:{config.server.port}")
    click.echo(f"Pages file: {config.data.pages_file}")
    if config.pages.cache_pages_full:
        click.echo(f"Page cache: {config.cache.cache_dir}")
    else:
        click.echo("Page cache: disabled")
    click.echo(f"Slugs scoped by parent: {'yes' if config.pages.scope_slug_by_parent else 'no'}")
    if config.pages.marketplace:
        click.echo("Site mode: marketplace")

    try:
        run_server(config)
    except (FileNotFoundError, ValueError, IntegrityError) as e:
        raise click.ClickException(str(e)) from e


@cache.command("clear")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help=CONFIG_OPTION_HELP,
)
def clear_cache(config_path: Path | None) -> None:
    """Remove all cached pages."""
    config = _load_config(config_path)
    FileCache(config.cache.cache_dir).clear()
    click.echo(f"Cleared page cache in {config.cache.cache_dir}")


@pages.command("check")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help=CONFIG_OPTION_HELP,
)
def check_pages(config_path: Path | None) -> None:
    """Check the page tree for broken parent chains."""
    config = _load_config(config_path)

    try:
        tree = load_tree(config.data.pages_file)
    except (FileNotFoundError, ValueError, IntegrityError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    errors: list[str] = []
    for page in tree:
        try:
            tree.parent_chain(page)
        except IntegrityError as e:
            errors.append(str(e))

    if errors:
        for error in errors:
            click.echo(f"Error: {error}", err=True)
        sys.exit(1)

    click.echo(f"{len(tree)} pages OK")
