"""Main CLI interface for API Changelog."""

import logging
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from api_changelog import __build_date__, __commit__, __version__
from api_changelog.config import load_config
from api_changelog.core.comparer import Comparer
from api_changelog.errors import ChangelogError

console = Console()


def _print_version_info(ctx: click.Context, param: click.Parameter, value: bool):
    """Print build metadata and exit before any command runs."""
    if not value or ctx.resilient_parsing:
        return
    console.print(f"Version:    {__version__}", highlight=False)
    console.print(f"Git Commit: {__commit__}", highlight=False)
    console.print(f"Build Date: {__build_date__}", highlight=False)
    ctx.exit(0)


def _setup_logging(verbose: bool) -> None:
    """Route library logging through rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=verbose)],
        force=True,
    )


@click.group()
@click.version_option(__version__, prog_name="api-changelog")
@click.option(
    "-V",
    "--version-info",
    is_flag=True,
    expose_value=False,
    is_eager=True,
    callback=_print_version_info,
    help="Show detailed version information",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
def main(verbose: bool):
    """API Changelog - Generate changelogs from OpenAPI specification changes."""
    _setup_logging(verbose)


@main.command()
@click.option(
    "--latest",
    "latest_path",
    type=click.Path(dir_okay=False, path_type=Path),
    required=True,
    help="path to the latest version of OpenAPI file",
)
@click.option(
    "--previous",
    "previous_path",
    type=click.Path(dir_okay=False, path_type=Path),
    required=True,
    help="path to the previous version of OpenAPI file",
)
@click.option(
    "--output",
    "output_path",
    type=click.Path(dir_okay=False, path_type=Path),
    required=True,
    help="path where to save the output changelog file",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="JSON file with rendering options",
)
@click.option("--date", default=None, help="Release date to print (default: today)")
def compare(
    latest_path: Path,
    previous_path: Path,
    output_path: Path,
    config_path: Optional[Path],
    date: Optional[str],
):
    """Compare two versions of OpenAPI files and generate a changelog."""
    try:
        config = load_config(config_path)
        comparer = Comparer.from_files(latest_path, previous_path, config=config)
        changelog_path = comparer.generate_changelog(output_path, date=date)
    except ChangelogError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise click.Abort() from e

    if changelog_path is None:
        console.print(
            "[yellow]No changes detected between the two OpenAPI documents.[/yellow]"
        )
    else:
        console.print(
            f"[green]✅ Changelog generated at: {escape(str(changelog_path))}[/green]"
        )


if __name__ == "__main__":
    main()
