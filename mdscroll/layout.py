"""Layout engine: flattens the block IR into display lines for one width.

Layout is cheap and width-dependent, so it is simply re-run from scratch on
every width change; the block IR it reads is never modified.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence

from rich.style import Style

from .models import (
    NULL_STYLE,
    CodeBlock,
    CodeLine,
    DocumentLine,
    EmptyLine,
    Heading,
    Paragraph,
    PreRenderedDocument,
    RenderedBlock,
    RuleLine,
    Spacer,
    StyledLine,
    StyledSpan,
    TextLine,
    ThematicBreak,
)
from .wrap import wrap_text

logger = logging.getLogger(__name__)

LineBreaker = Callable[[str, int], list[str]]

LABEL_STYLE = Style(color="bright_black", italic=True)


def flatten(
    blocks: Sequence[RenderedBlock], width: int, breaker: LineBreaker = wrap_text
) -> PreRenderedDocument:
    """Lay blocks out as display lines for a given width.

    One empty line separates adjacent blocks. Headings and paragraphs are
    wrapped; code lines are emitted as-is after an optional language label;
    a thematic break is one rule line; a spacer is `count` empty lines.

    Args:
        blocks: Parsed blocks in document order.
        width: Viewport width in cells; values below 1 are clamped to 1.
        breaker: Line breaking function used for text blocks.

    Returns:
        PreRenderedDocument: Lines for this width.

    Examples:
        flatten(parse_markdown("# Title\\n\\nBody"), 80).total_height  # 3
    """
    width = max(width, 1)
    lines: list[DocumentLine] = []

    for index, block in enumerate(blocks):
        if index > 0:
            lines.append(EmptyLine())

        if isinstance(block, (Heading, Paragraph)):
            wrapped = wrap_styled_spans(block.content, width, breaker)
            if not wrapped:
                lines.append(EmptyLine())
            lines.extend(TextLine(line) for line in wrapped)
        elif isinstance(block, CodeBlock):
            if block.language:
                lines.append(CodeLine([StyledSpan(block.language, LABEL_STYLE)]))
            lines.extend(CodeLine(list(line)) for line in block.highlighted_lines)
        elif isinstance(block, ThematicBreak):
            lines.append(RuleLine())
        elif isinstance(block, Spacer):
            lines.extend(EmptyLine() for _ in range(block.count))
        else:
            raise TypeError(f"Unsupported block type: {type(block).__name__}")

    return PreRenderedDocument(tuple(lines))


def wrap_styled_spans(
    spans: Sequence[StyledSpan], width: int, breaker: LineBreaker = wrap_text
) -> list[StyledLine]:
    """Wrap styled spans to `width`, keeping every character's style.

    The span texts are concatenated into one plain buffer with a parallel
    per-character style table. The breaker wraps the plain buffer, and each
    returned line is located in the buffer with a cursor that only moves
    forward, so repeated text elsewhere in the buffer can never be matched by
    mistake. Hard breaks (``"\\n"``) split the spans into groups that are
    wrapped independently.

    Args:
        spans: Inline content of a heading or paragraph.
        width: Maximum line width in cells; values below 1 are clamped to 1.
        breaker: Line breaking function.

    Returns:
        list[StyledLine]: Wrapped lines; empty when there is no text.
    """
    if not spans:
        return []

    width = max(width, 1)
    if any("\n" in span.text for span in spans):
        result: list[StyledLine] = []
        for group in split_hard_breaks(spans):
            result.extend(wrap_styled_spans(group, width, breaker) or [[]])
        return result

    plain = "".join(span.text for span in spans)
    if not plain:
        return []
    char_styles = [span.style for span in spans for _ in span.text]

    result = []
    cursor = 0
    for line in breaker(plain, width):
        # Skip the whitespace the breaker consumed between lines.
        while (
            cursor < len(plain)
            and not plain.startswith(line, cursor)
            and plain[cursor].isspace()
        ):
            cursor += 1

        if not plain.startswith(line, cursor):
            logger.debug("Wrapped line %r is not a substring at offset %d", line, cursor)
            result.append([StyledSpan(line, NULL_STYLE)])
            continue

        end = cursor + len(line)
        result.append(build_spans_for_range(plain, char_styles, cursor, end))
        cursor = end

    return result


def build_spans_for_range(
    plain: str, char_styles: Sequence[Style], start: int, end: int
) -> StyledLine:
    """Group ``plain[start:end]`` into runs of identical style.

    Args:
        plain: Concatenated text of all spans.
        char_styles: Style of each character of `plain`.
        start: First character index (inclusive).
        end: Last character index (exclusive).

    Returns:
        StyledLine: Minimal list of spans covering the range.

    Examples:
        build_spans_for_range("ab", [bold, bold], 0, 2)  # [StyledSpan("ab", bold)]
    """
    end = min(end, len(plain))
    if start >= end:
        return []

    spans: StyledLine = []
    run_start = start
    run_style = char_styles[start]
    for position in range(start + 1, end):
        style = char_styles[position]
        if style != run_style:
            spans.append(StyledSpan(plain[run_start:position], run_style))
            run_start = position
            run_style = style
    spans.append(StyledSpan(plain[run_start:end], run_style))
    return spans


def split_hard_breaks(spans: Sequence[StyledSpan]) -> list[list[StyledSpan]]:
    """Split spans into groups at every ``"\\n"`` character.

    Each piece keeps the style of the span it came from. A group can be empty
    (for example between two consecutive hard breaks).

    Examples:
        split_hard_breaks([StyledSpan("a\\nb")])  # [[StyledSpan("a")], [StyledSpan("b")]]
    """
    groups: list[list[StyledSpan]] = []
    current: list[StyledSpan] = []
    for span in spans:
        parts = span.text.split("\n")
        for index, part in enumerate(parts):
            if index:
                groups.append(current)
                current = []
            if part:
                current.append(StyledSpan(part, span.style))
    if current:
        groups.append(current)
    return groups
