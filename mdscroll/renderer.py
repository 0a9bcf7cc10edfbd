"""Terminal presentation of laid-out documents with rich."""

from __future__ import annotations

from collections.abc import Iterable

from rich.cells import cell_len
from rich.console import Console
from rich.style import Style
from rich.text import Text

from .constants import CODE_BACKGROUND, RULE_CHARACTER, STATUS_BAR_STYLE
from .models import (
    CodeLine,
    DocumentLine,
    EmptyLine,
    PreRenderedDocument,
    RuleLine,
    StyledSpan,
    TextLine,
)
from .viewer import Viewer


def spans_to_text(spans: Iterable[StyledSpan], base: Style | None = None) -> Text:
    """Build a non-wrapping `Text` from styled spans.

    Args:
        spans: Spans to append in order.
        base: Optional style under every span; attributes a span sets itself
            (such as a token background) win.
    """
    text = Text(no_wrap=True, overflow="crop")
    for span in spans:
        text.append(span.text, base + span.style if base else span.style)
    return text


def render_line(
    line: DocumentLine, width: int, code_background: str = CODE_BACKGROUND
) -> Text:
    """Convert one document line to rich `Text`.

    Code lines get a one-cell left margin and a background that runs to the
    right edge. Rules repeat ``─`` across the full width.

    Raises:
        TypeError: If `line` is not a known document line.
    """
    if isinstance(line, TextLine):
        return spans_to_text(line.spans)
    if isinstance(line, CodeLine):
        background = Style(bgcolor=code_background)
        text = spans_to_text([StyledSpan(" "), *line.spans], background)
        padding = width - cell_len(text.plain)
        if padding > 0:
            text.append(" " * padding, background)
        return text
    if isinstance(line, EmptyLine):
        return Text()
    if isinstance(line, RuleLine):
        return Text(RULE_CHARACTER * width, style="dim")
    raise TypeError(f"Unsupported line type: {type(line).__name__}")


def status_bar(viewer: Viewer, width: int) -> Text:
    """Build the one-row status bar: file name, scroll percent, position."""
    total = viewer.document.total_height
    current = 0 if total == 0 else viewer.scroll_offset + 1
    label = f" {viewer.filename} | {viewer.scroll_percent()}% | {current}/{total} "
    text = Text(label, style=STATUS_BAR_STYLE, no_wrap=True, overflow="crop")
    text.truncate(width, pad=True)
    return text


def render_frame(
    viewer: Viewer,
    width: int,
    code_background: str = CODE_BACKGROUND,
    show_status_bar: bool = True,
    status_width: int | None = None,
) -> Text:
    """Build the renderable for one screen: visible lines plus the status bar.

    Rows below the end of the document are left blank so the status bar stays
    on the last row. The status bar spans `status_width` cells, which
    defaults to `width`.
    """
    lines = viewer.document.lines
    rows = [render_line(lines[index], width, code_background) for index in viewer.visible_range()]
    rows.extend(Text() for _ in range(viewer.viewport_height - len(rows)))
    if show_status_bar:
        rows.append(status_bar(viewer, status_width or width))
    separator = Text("\n", no_wrap=True, overflow="crop", end="")
    return separator.join(rows)


def render_document(
    document: PreRenderedDocument,
    console: Console,
    width: int,
    code_background: str = CODE_BACKGROUND,
):
    """Print every line of a document once, for non-interactive output."""
    for line in document.lines:
        console.print(render_line(line, width, code_background), soft_wrap=False, crop=True)
