"""Data models for mdscroll."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Union

from rich.style import Style

NULL_STYLE = Style.null()


@dataclass(frozen=True)
class StyledSpan:
    """A contiguous run of text sharing one display style.

    Attributes:
        text: The characters of the run.
        style: Display style applied to every character of the run.
    """

    text: str
    style: Style = NULL_STYLE


StyledLine = list[StyledSpan]


@dataclass(frozen=True)
class Heading:
    """Heading block; `level` is always between 1 and 6.

    Attributes:
        level: Heading level.
        content: Styled inline content.
    """

    level: int
    content: list[StyledSpan] = field(default_factory=list)

    def __post_init__(self):
        if not 1 <= self.level <= 6:
            raise ValueError(f"Heading level must be between 1 and 6, got {self.level}")


@dataclass(frozen=True)
class Paragraph:
    """Paragraph of wrapped, inline-styled text."""

    content: list[StyledSpan] = field(default_factory=list)


@dataclass(frozen=True)
class CodeBlock:
    """Fenced or indented code block.

    Attributes:
        language: Normalized language token; empty for indented or bare fences.
        highlighted_lines: Lines produced by the highlighter, never re-wrapped.
    """

    language: str = ""
    highlighted_lines: list[StyledLine] = field(default_factory=list)


@dataclass(frozen=True)
class ThematicBreak:
    """Horizontal rule."""


@dataclass(frozen=True)
class Spacer:
    """Vertical spacing of `count` blank lines."""

    count: int = 1

    def __post_init__(self):
        if self.count < 0:
            raise ValueError(f"Spacer count must be >= 0, got {self.count}")


RenderedBlock = Union[Heading, Paragraph, CodeBlock, ThematicBreak, Spacer]


class ParserState(Enum):
    """Block-level states of the parser state machine.

    Attributes:
        TOP_LEVEL: Not inside any block.
        IN_HEADING: Accumulating heading content.
        IN_PARAGRAPH: Accumulating paragraph content.
        IN_CODE_BLOCK: Buffering raw code text.
        SKIPPING: Inside an unsupported construct being swallowed.
    """

    TOP_LEVEL = auto()
    IN_HEADING = auto()
    IN_PARAGRAPH = auto()
    IN_CODE_BLOCK = auto()
    SKIPPING = auto()


@dataclass
class StateFrame:
    """One entry of the parser state stack.

    Only the fields relevant to `state` are meaningful.

    Attributes:
        state: Which state this frame represents.
        level: Heading level for `IN_HEADING`.
        language: Normalized language token for `IN_CODE_BLOCK`.
        buffer: Raw code text chunks for `IN_CODE_BLOCK`.
        depth: Nesting depth for `SKIPPING`.
    """

    state: ParserState = ParserState.TOP_LEVEL
    level: int = 0
    language: str = ""
    buffer: list[str] = field(default_factory=list)
    depth: int = 0

    def __repr__(self) -> str:
        if self.state is ParserState.IN_HEADING:
            return f"InHeading({self.level})"
        if self.state is ParserState.IN_CODE_BLOCK:
            return f"InCodeBlock({self.language!r})"
        if self.state is ParserState.SKIPPING:
            return f"Skipping({self.depth})"
        return self.state.name.title().replace("_", "")


@dataclass(frozen=True)
class TextLine:
    """Wrapped line of styled text."""

    spans: StyledLine = field(default_factory=list)


@dataclass(frozen=True)
class CodeLine:
    """Line of code; never wrapped, may overflow the viewport."""

    spans: StyledLine = field(default_factory=list)


@dataclass(frozen=True)
class EmptyLine:
    """Blank spacer line."""


@dataclass(frozen=True)
class RuleLine:
    """Horizontal rule spanning the viewport."""


DocumentLine = Union[TextLine, CodeLine, EmptyLine, RuleLine]


@dataclass(frozen=True)
class PreRenderedDocument:
    """All display lines laid out for one width.

    A new document replaces the old one on every width change.

    Attributes:
        lines: Display lines in order.
        total_height: Number of lines; always equal to ``len(lines)``.
    """

    lines: tuple[DocumentLine, ...] = ()
    total_height: int = field(init=False)

    def __post_init__(self):
        object.__setattr__(self, "total_height", len(self.lines))


def line_text(spans: StyledLine) -> str:
    """Concatenate the text of a styled line."""
    return "".join(span.text for span in spans)
