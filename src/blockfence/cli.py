"""CLI entry point for Blockfence."""

from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from blockfence import __version__
from blockfence.config import ConfigManager
from blockfence.logseq.fences import find_fenced_regions, find_unclosed_fence
from blockfence.models.block import Block, Page
from blockfence.utils.logging import configure_logging, get_logger


logger = get_logger(__name__)
console = Console()


def read_block_source(path: Optional[Path], text: Optional[str]) -> str:
    """
    Resolve the block text from a file argument or the --text option.

    Args:
        path: File holding raw block text (may be None)
        text: Literal block text from --text (may be None)

    Returns:
        Block source ('' when neither is given)

    Raises:
        click.UsageError: If both are given
    """
    if path is not None and text is not None:
        raise click.UsageError("Pass either FILE or --text, not both")
    if path is not None:
        return path.read_text()
    return text or ""


def load_config(config_path: Optional[Path]) -> ConfigManager:
    """
    Load configuration from an explicit path or the default location.

    Returns:
        ConfigManager instance

    Raises:
        click.ClickException: If the config file is missing or invalid
    """
    try:
        if config_path is None:
            return ConfigManager.load_default()
        return ConfigManager.load_from_path(config_path)
    except FileNotFoundError as e:
        raise click.ClickException(str(e))
    except ValueError as e:
        raise click.ClickException(str(e))


def line_number_at(text: str, offset: int) -> int:
    """One-based line number of a character offset."""
    return text.count("\n", 0, offset) + 1


@click.group()
@click.version_option(version=__version__, prog_name="blockfence")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to configuration file (default: ~/.config/blockfence/config.yaml)",
)
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[Path]):
    """Blockfence: edit Logseq-style blocks with fenced code regions."""
    configure_logging()
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path


@cli.command()
@click.argument("file", required=False, type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--text", help="Block source to edit instead of FILE")
@click.option("--title", default="untitled", show_default=True, help="Page title shown in the editor")
@click.pass_context
def edit(ctx: click.Context, file: Optional[Path], text: Optional[str], title: str):
    """
    Open the block editor and print the resulting page on exit.

    Examples:
        blockfence edit snippet.md
        blockfence edit --text '```clojure\n(+ 1 1)\n```'
    """
    source = read_block_source(file, text)
    config_mgr = load_config(ctx.obj["config_path"])

    from blockfence.tui.app import BlockfenceApp

    page = Page(title=title, blocks=[Block(content=source)])
    logger.info("edit_command_started", title=title, length=len(source))

    app = BlockfenceApp(page=page, config=config_mgr.config)
    result = app.run()

    logger.info("edit_command_completed", block_count=len(page.blocks))
    if result is not None:
        click.echo(result)


@cli.command()
@click.argument("file", required=False, type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--text", help="Block source to inspect instead of FILE")
def regions(file: Optional[Path], text: Optional[str]):
    """
    List the fenced code regions in a block.

    Examples:
        blockfence regions snippet.md
        blockfence regions --text 'Heading\n```clojure\n```'
    """
    source = read_block_source(file, text)
    found = find_fenced_regions(source)
    logger.info("regions_command", region_count=len(found))

    if not found:
        click.echo("No fenced code regions found")
    else:
        table = Table(title=f"{len(found)} fenced region(s)")
        table.add_column("#", justify="right")
        table.add_column("Language")
        table.add_column("Lines", justify="right")
        table.add_column("Fence lines")

        for region in found:
            table.add_row(
                str(region.index),
                region.language or "-",
                str(region.line_count),
                f"{line_number_at(source, region.fence_start)}-{line_number_at(source, region.close_start)}",
            )
        console.print(table)

    unclosed = find_unclosed_fence(source)
    if unclosed is not None:
        click.echo(f"Warning: unclosed code fence at line {unclosed + 1}", err=True)


def main():
    """Main entry point for the console script."""
    cli()


if __name__ == "__main__":
    main()
