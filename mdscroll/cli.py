"""
Displays a Markdown file in the terminal.
On a terminal it opens a scrollable full-screen view; otherwise it prints the
rendered document once.
"""

from __future__ import annotations

import logging
from pathlib import Path

import click
from rich.console import Console

from .config import ConfigError, build_config
from .constants import STDIN_PATH
from .exceptions import MdscrollError
from .filesystem import display_name, get_max_file_size, read_source
from .highlight import Highlighter, available_themes
from .layout import flatten
from .pager import run_pager
from .parser import parse_markdown
from .renderer import render_document
from .viewer import Viewer

__all__ = ["cli"]

LOG_FORMAT = "[%(name)s] %(levelname)s %(message)s"


def setup_logging(debug: bool):
    """Send package logs to stderr; DEBUG with `--debug`, WARNING otherwise."""
    logger = logging.getLogger("mdscroll")
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.handlers[:] = [handler]
    logger.setLevel(logging.DEBUG if debug else logging.WARNING)


def _list_themes(ctx: click.Context, _param: click.Parameter, value: bool):
    if not value or ctx.resilient_parsing:
        return
    for name in available_themes():
        click.echo(name)
    ctx.exit()


@click.command()
@click.version_option()
@click.option("--theme", help="Syntax highlighting theme (see --list-themes)")
@click.option("--width", type=int, help="Fixed layout width in columns")
@click.option("--print", "print_only", is_flag=True, help="Print once instead of paging")
@click.option("--strict", is_flag=True, help="Fail on malformed Markdown structure")
@click.option("--debug", is_flag=True, help="Log debugging information to stderr")
@click.option(
    "--list-themes",
    is_flag=True,
    expose_value=False,
    is_eager=True,
    callback=_list_themes,
    help="List available themes and exit",
)
@click.argument("filepath", type=click.Path(dir_okay=False, allow_dash=True))
def cli(
    filepath: str,
    theme: str | None = None,
    width: int | None = None,
    print_only: bool = False,
    strict: bool = False,
    debug: bool = False,
):
    """
    Entry point for viewing a Markdown file.

    Args:
        filepath: Path to the Markdown file, or `-` for standard input.
        theme: Override for the highlighting theme.
        width: Override for the layout width.
        print_only: Print the rendered document instead of paging.
        strict: Raise on malformed event sequences instead of recovering.
        debug: Enable debug logging.

    Raises:
        click.BadParameter: If configuration values or overrides are invalid.
        click.ClickException: If the file cannot be loaded or parsed.

    Examples:
        mdscroll README.md --theme dracula
        cat notes.md | mdscroll - --print
    """
    setup_logging(debug)

    search_path = Path.cwd() if filepath == STDIN_PATH else Path(filepath).expanduser().parent
    try:
        config = build_config(search_path, theme=theme, width=width)
    except ConfigError as error:
        raise click.BadParameter(str(error)) from error

    try:
        max_file_size = get_max_file_size(default=config.max_file_size)
    except ValueError as error:
        raise click.ClickException(str(error)) from error

    try:
        source = read_source(filepath, max_file_size, click.get_binary_stream("stdin"))
    except (IOError, MdscrollError) as error:
        raise click.ClickException(str(error)) from error

    highlighter = Highlighter(config.max_highlight_bytes)
    try:
        blocks = parse_markdown(source, highlighter, config.theme, strict)
    except MdscrollError as error:
        raise click.ClickException(str(error)) from error

    console = Console()
    if print_only or not console.is_terminal:
        if config.width is not None:
            console = Console(width=config.width)
        document = flatten(blocks, console.width)
        render_document(document, console, console.width, config.code_background)
        return

    viewer = Viewer(blocks, config.width or console.width, filename=display_name(filepath))
    run_pager(viewer, console, config)


if __name__ == "__main__":
    cli()
