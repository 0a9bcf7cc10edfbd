"""Interactive full-screen pager loop."""

from __future__ import annotations

import logging
import select
import sys
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import TextIO

import click
from rich.console import Console, ConsoleDimensions

from .config import ViewerConfig
from .constants import RESIZE_POLL_SECONDS
from .renderer import render_frame
from .viewer import Viewer

logger = logging.getLogger(__name__)


def stdin_ready(timeout: float) -> bool:
    """Wait up to `timeout` seconds for a key press on standard input.

    Streams that cannot be polled (no file descriptor, or Windows consoles)
    report ready at once, so the caller falls back to a blocking read.
    """
    try:
        ready, _, _ = select.select([sys.stdin], [], [], timeout)
    except (ValueError, OSError):
        return True
    return bool(ready)


@contextmanager
def cbreak_mode(stream: TextIO) -> Iterator[None]:
    """Deliver key presses without waiting for Enter (POSIX terminals only)."""
    try:
        import termios
        import tty
    except ImportError:
        yield
        return

    try:
        fd = stream.fileno()
        saved = termios.tcgetattr(fd)
    except (ValueError, OSError, termios.error):
        yield
        return

    try:
        tty.setcbreak(fd)
        yield
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, saved)


def _draw(screen, viewer: Viewer, config: ViewerConfig, size: ConsoleDimensions):
    width, height = size
    layout_width = min(config.width or width, width)
    content_height = height - 1 if config.show_status_bar else height
    viewer.resize(layout_width, content_height)
    screen.update(
        render_frame(
            viewer,
            layout_width,
            config.code_background,
            config.show_status_bar,
            status_width=width,
        )
    )


def run_pager(
    viewer: Viewer,
    console: Console,
    config: ViewerConfig,
    getchar: Callable[[], str] = click.getchar,
    wait_for_key: Callable[[float], bool] = stdin_ready,
):
    """Show `viewer` on the alternate screen until the user quits.

    While no key is pending the console size is polled every
    `RESIZE_POLL_SECONDS`; a change redraws the frame at once, and a width
    change makes the viewer lay the document out again. Ctrl-C and end of
    input also quit.

    Args:
        viewer: State to display and update.
        console: Console attached to the terminal.
        config: Presentation settings (fixed width, status bar, colors).
        getchar: Single key reader.
        wait_for_key: Returns True once a key can be read without blocking,
            or False when the timeout passes first.
    """
    drawn_size = None
    with console.screen(hide_cursor=True) as screen, cbreak_mode(sys.stdin):
        while not viewer.quit:
            size = console.size
            if size != drawn_size:
                _draw(screen, viewer, config, size)
                drawn_size = size

            try:
                if not wait_for_key(RESIZE_POLL_SECONDS):
                    continue
                key = getchar()
            except (KeyboardInterrupt, EOFError):
                logger.debug("Input closed; leaving pager")
                break
            viewer.handle_key(key)
            drawn_size = None
