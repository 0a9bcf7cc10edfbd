"""Style resolution for headings and inline formatting.

Every function here is pure. Styles are `rich.style.Style` values, and adding
two styles is an override patch: attributes set on the right-hand style win,
unset ones fall through to the left-hand style.
"""

from __future__ import annotations

from collections.abc import Iterable

from rich.style import Style

_HEADING_COLORS = {
    1: "bright_cyan",
    2: "green",
    3: "yellow",
}


def heading_style(level: int) -> Style:
    """Return the display style for a heading level.

    Levels 1-3 are bold in distinct colors; levels 4-6 share white bold italic.
    Out-of-range levels are clamped into 1..6.

    Args:
        level: Heading level.

    Returns:
        Style: Style applied to the heading's text.

    Examples:
        heading_style(1)  # Style(color="bright_cyan", bold=True)
    """
    level = min(max(level, 1), 6)
    color = _HEADING_COLORS.get(level, "white")
    if level <= 3:
        return Style(color=color, bold=True)
    return Style(color=color, bold=True, italic=True)


def inline_code_style() -> Style:
    """Style for inline code spans; absolute, never merged with the stack."""
    return Style(color="color(252)", bgcolor="color(236)", bold=True, italic=True)


def emphasis_style() -> Style:
    return Style(italic=True)


def strong_style() -> Style:
    return Style(bold=True)


def strikethrough_style() -> Style:
    return Style(strike=True)


def link_style() -> Style:
    """Link text is italic; the destination is not shown."""
    return Style(italic=True)


def effective_style(stack: Iterable[Style]) -> Style:
    """Merge a style stack from base to top into one style.

    Args:
        stack: Active style entries, base first.

    Returns:
        Style: The merged style; a null style when the stack is empty.

    Examples:
        effective_style([heading_style(2), emphasis_style()])
    """
    merged = Style.null()
    for style in stack:
        merged = merged + style
    return merged
