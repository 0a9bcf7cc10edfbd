"""Width-aware line breaking.

Breaks plain text into lines no wider than a given number of terminal cells.
Break opportunities come from the Unicode line breaking algorithm (UAX #14)
as implemented by `uniseg`, so they are locale-agnostic: after spaces, after
hyphens and zero-width spaces, between ideographs, and so on. A word wider
than the line is cut between grapheme clusters (UAX #29) as a last resort.
"""

from __future__ import annotations

from dataclasses import dataclass

from rich.cells import cell_len
from uniseg.graphemecluster import grapheme_clusters
from uniseg.linebreak import line_break_units

NO_BREAK_SPACES = frozenset("\u00a0\u2007\u202f\ufeff")


@dataclass(frozen=True)
class Fragment:
    """An unbreakable piece of text followed by the whitespace after it.

    Attributes:
        text: Visible content; never split across lines.
        whitespace: Whitespace following `text`; dropped at a line break.
    """

    text: str
    whitespace: str = ""

    @property
    def width(self) -> int:
        return cell_len(self.text)

    @property
    def whitespace_width(self) -> int:
        return cell_len(self.whitespace)


def is_break_space(char: str) -> bool:
    """Whether `char` is whitespace that allows a line break after it."""
    return char.isspace() and char not in NO_BREAK_SPACES


def _split_trailing_space(unit: str) -> Fragment:
    end = len(unit)
    while end and is_break_space(unit[end - 1]):
        end -= 1
    return Fragment(unit[:end], unit[end:])


def split_fragments(text: str) -> list[Fragment]:
    """Split text at every line break opportunity.

    Concatenating ``text + whitespace`` over the result reproduces `text`
    exactly.

    Args:
        text: Text without hard line breaks.

    Returns:
        list[Fragment]: Unbreakable fragments in order.

    Examples:
        split_fragments("ab  cd")  # [Fragment("ab", "  "), Fragment("cd", "")]
        split_fragments("well-known")  # [Fragment("well-"), Fragment("known")]
    """
    fragments: list[Fragment] = []
    for unit in line_break_units(text):
        fragment = _split_trailing_space(unit)
        if not fragment.text and fragments:
            previous = fragments[-1]
            fragments[-1] = Fragment(previous.text, previous.whitespace + fragment.whitespace)
        else:
            fragments.append(fragment)
    return fragments


def _split_long_fragment(fragment: Fragment, width: int) -> list[Fragment]:
    """Cut a fragment wider than `width` into pieces that fit.

    Only the last piece keeps the trailing whitespace. A single cluster wider
    than `width` becomes its own (overflowing) piece.
    """
    pieces: list[str] = []
    piece = ""
    piece_width = 0
    for cluster in grapheme_clusters(fragment.text):
        cluster_width = cell_len(cluster)
        if piece and piece_width + cluster_width > width:
            pieces.append(piece)
            piece = ""
            piece_width = 0
        piece += cluster
        piece_width += cluster_width
    pieces.append(piece)
    return [Fragment(text) for text in pieces[:-1]] + [Fragment(pieces[-1], fragment.whitespace)]


def wrap_text(text: str, width: int) -> list[str]:
    """Wrap text into lines at most `width` cells wide.

    Lines are filled greedily. Whitespace at a break point is consumed and
    does not appear in the output; whitespace inside a line is kept verbatim.
    Each returned line is therefore a verbatim substring of `text`.

    Args:
        text: Text without hard line breaks.
        width: Maximum line width in cells; values below 1 are treated as 1.

    Returns:
        list[str]: Wrapped lines. Empty when `text` holds no visible content.

    Examples:
        wrap_text("aaa bbb ccc", 7)  # ["aaa bbb", "ccc"]
        wrap_text("abcdefgh", 3)  # ["abc", "def", "gh"]
    """
    width = max(width, 1)
    fragments: list[Fragment] = []
    for fragment in split_fragments(text):
        if fragment.width > width:
            fragments.extend(_split_long_fragment(fragment, width))
        else:
            fragments.append(fragment)

    if not any(fragment.text for fragment in fragments):
        return []

    lines: list[str] = []
    current: list[Fragment] = []
    current_width = 0
    for fragment in fragments:
        if current:
            gap = current[-1].whitespace_width
            if current_width + gap + fragment.width > width:
                lines.append(_join(current))
                current = []
                current_width = 0
            else:
                current_width += gap
        current.append(fragment)
        current_width += fragment.width
    if current:
        lines.append(_join(current))
    return [line for line in lines if line]


def _join(fragments: list[Fragment]) -> str:
    parts = []
    for fragment in fragments[:-1]:
        parts.append(fragment.text)
        parts.append(fragment.whitespace)
    parts.append(fragments[-1].text)
    return "".join(parts)
