"""Viewer state: scroll position, viewport size and key handling.

`Viewer` is a plain state container. It never draws anything; the renderer
reads from it to decide what to show.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum, auto

from .layout import flatten
from .models import PreRenderedDocument, RenderedBlock

logger = logging.getLogger(__name__)


class Key(Enum):
    """Viewer actions produced by the host input loop."""

    DOWN = auto()
    UP = auto()
    HALF_PAGE_DOWN = auto()
    HALF_PAGE_UP = auto()
    TOP = auto()
    BOTTOM = auto()
    QUIT = auto()


# Raw sequences as returned by `click.getchar()` on POSIX and Windows terminals.
KEY_BINDINGS: dict[str, Key] = {
    "j": Key.DOWN,
    "\x1b[B": Key.DOWN,
    "\xe0P": Key.DOWN,
    "k": Key.UP,
    "\x1b[A": Key.UP,
    "\xe0H": Key.UP,
    "d": Key.HALF_PAGE_DOWN,
    "\x1b[6~": Key.HALF_PAGE_DOWN,
    "\xe0Q": Key.HALF_PAGE_DOWN,
    "u": Key.HALF_PAGE_UP,
    "\x1b[5~": Key.HALF_PAGE_UP,
    "\xe0I": Key.HALF_PAGE_UP,
    "g": Key.TOP,
    "\x1b[H": Key.TOP,
    "\x1b[1~": Key.TOP,
    "\xe0G": Key.TOP,
    "G": Key.BOTTOM,
    "\x1b[F": Key.BOTTOM,
    "\x1b[4~": Key.BOTTOM,
    "\xe0O": Key.BOTTOM,
    "q": Key.QUIT,
    "\x1b": Key.QUIT,
    "\x03": Key.QUIT,
}


def parse_key(raw: str) -> Key | None:
    """Map a raw key sequence to a viewer action, or None when unbound."""
    return KEY_BINDINGS.get(raw)


@dataclass
class Viewer:
    """Scrollable view over a laid-out document.

    Keeps the parsed blocks so a width change can lay them out again without
    re-parsing.

    Attributes:
        blocks: Parsed document blocks.
        width: Width the current document was laid out for.
        viewport_height: Number of visible document rows.
        filename: Name shown in the status bar.
        document: Lines laid out for `width`.
        scroll_offset: Index of the first visible line.
        quit: Set when the user asked to leave.
    """

    blocks: Sequence[RenderedBlock]
    width: int
    viewport_height: int = 0
    filename: str = ""
    document: PreRenderedDocument = field(init=False)
    scroll_offset: int = 0
    quit: bool = False

    def __post_init__(self):
        self.width = max(self.width, 1)
        self.document = flatten(self.blocks, self.width)

    def handle_key(self, key: Key | str | None):
        """Apply a key press; unknown keys are ignored."""
        if isinstance(key, str):
            key = parse_key(key)
        if key is Key.DOWN:
            self.scroll_down(1)
        elif key is Key.UP:
            self.scroll_up(1)
        elif key is Key.HALF_PAGE_DOWN:
            self.scroll_down(max(self.viewport_height // 2, 1))
        elif key is Key.HALF_PAGE_UP:
            self.scroll_up(max(self.viewport_height // 2, 1))
        elif key is Key.TOP:
            self.scroll_to_top()
        elif key is Key.BOTTOM:
            self.scroll_to_bottom()
        elif key is Key.QUIT:
            self.quit = True

    def resize(self, width: int, viewport_height: int):
        """Adapt to a new terminal size.

        A width change lays the blocks out again from scratch. The scroll
        offset is clamped to the new maximum either way.
        """
        width = max(width, 1)
        if width != self.width:
            logger.debug("Relayout from %d to %d columns", self.width, width)
            self.width = width
            self.document = flatten(self.blocks, width)
        self.viewport_height = max(viewport_height, 0)
        self.scroll_offset = min(self.scroll_offset, self.max_scroll())

    def visible_range(self) -> range:
        """Indices of the document lines inside the viewport."""
        end = min(self.scroll_offset + self.viewport_height, self.document.total_height)
        return range(self.scroll_offset, max(end, self.scroll_offset))

    def max_scroll(self) -> int:
        """Largest valid scroll offset; 0 when the document fits."""
        return max(self.document.total_height - self.viewport_height, 0)

    def scroll_down(self, lines: int):
        self.scroll_offset = min(self.scroll_offset + lines, self.max_scroll())

    def scroll_up(self, lines: int):
        self.scroll_offset = max(self.scroll_offset - lines, 0)

    def scroll_to_top(self):
        self.scroll_offset = 0

    def scroll_to_bottom(self):
        self.scroll_offset = self.max_scroll()

    def scroll_percent(self) -> int:
        """Scroll position as 0-100; 100 when the document fits."""
        max_scroll = self.max_scroll()
        if max_scroll == 0:
            return 100
        return int(self.scroll_offset / max_scroll * 100)
