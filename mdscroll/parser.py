"""Markdown block parser.

Turns the linear event stream from `mdscroll.events` into the block-level
IR consumed by the layout engine. Parsing happens once per document; the
resulting blocks do not depend on the display width.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Protocol

from rich.style import Style

from .constants import DEFAULT_THEME
from .events import Event, EventKind, Tag, iter_events, normalize_language
from .exceptions import ParserInvariantError
from .highlight import default_highlighter
from .models import (
    CodeBlock,
    Heading,
    Paragraph,
    ParserState,
    RenderedBlock,
    StateFrame,
    StyledLine,
    StyledSpan,
    ThematicBreak,
)
from .styles import (
    effective_style,
    emphasis_style,
    heading_style,
    inline_code_style,
    link_style,
    strikethrough_style,
    strong_style,
)

logger = logging.getLogger(__name__)

_INLINE_MODIFIERS = {
    Tag.EMPHASIS: emphasis_style,
    Tag.STRONG: strong_style,
    Tag.STRIKETHROUGH: strikethrough_style,
    Tag.LINK: link_style,
}


class CodeHighlighter(Protocol):
    def highlight(self, code: str, language: str, theme: str) -> list[StyledLine]: ...


class ParseContext:
    """Mutable state for a single parse pass.

    Holds the state stack, the style stack and the spans accumulated for the
    block being built. Both stacks keep a base entry that is never popped;
    an attempt to pop it is an invariant violation and becomes a no-op.

    Args:
        highlighter: Collaborator used to style code blocks.
        theme: Theme name passed to the highlighter for every code block.
        strict: Raise `ParserInvariantError` on invariant violations instead
            of logging and recovering.
    """

    def __init__(
        self, highlighter: CodeHighlighter, theme: str = DEFAULT_THEME, strict: bool = False
    ):
        self.highlighter = highlighter
        self.theme = theme
        self.strict = strict
        self.blocks: list[RenderedBlock] = []
        self.state_stack: list[StateFrame] = [StateFrame(ParserState.TOP_LEVEL)]
        self.style_stack: list[Style] = [Style.null()]
        self.current_spans: list[StyledSpan] = []
        self._event: Event | None = None

    @property
    def top(self) -> StateFrame:
        return self.state_stack[-1]

    def process(self, events: Iterable[Event]) -> list[RenderedBlock]:
        """Consume every event and return the finished blocks."""
        for event in events:
            self.on_event(event)
        return self.blocks

    def on_event(self, event: Event):
        """Route an event according to the state on top of the stack."""
        self._event = event
        state = self.top.state
        if state is ParserState.IN_CODE_BLOCK:
            self._on_code_block_event(event)
        elif state is ParserState.SKIPPING:
            self._on_skipping_event(event)
        else:
            self._dispatch(event)

    def _on_code_block_event(self, event: Event):
        if event.kind is EventKind.TEXT:
            self.top.buffer.append(event.text)
        elif event.kind is EventKind.END and event.tag is Tag.CODE_BLOCK:
            frame = self._pop_state()
            if frame is None:
                return
            highlighted_lines = self.highlighter.highlight(
                "".join(frame.buffer), frame.language, self.theme
            )
            self.blocks.append(CodeBlock(frame.language, highlighted_lines))

    def _on_skipping_event(self, event: Event):
        depth = self.top.depth
        if event.kind is EventKind.START:
            self.state_stack[-1] = StateFrame(ParserState.SKIPPING, depth=depth + 1)
        elif event.kind is EventKind.END:
            if depth == 0:
                self._pop_state()
            else:
                self.state_stack[-1] = StateFrame(ParserState.SKIPPING, depth=depth - 1)

    def _dispatch(self, event: Event):
        kind = event.kind
        tag = event.tag

        if kind is EventKind.START:
            if tag is Tag.HEADING:
                self._start_heading(event.level)
            elif tag is Tag.PARAGRAPH:
                self._start_block(StateFrame(ParserState.IN_PARAGRAPH))
            elif tag is Tag.CODE_BLOCK:
                self.state_stack.append(
                    StateFrame(ParserState.IN_CODE_BLOCK, language=normalize_language(event.info))
                )
            elif tag in _INLINE_MODIFIERS:
                self.style_stack.append(_INLINE_MODIFIERS[tag]())
            elif tag is Tag.IMAGE:
                # Alt text flows through unstyled.
                pass
            else:
                logger.debug("Skipping unsupported construct %s", event.name or tag)
                self.state_stack.append(StateFrame(ParserState.SKIPPING))
        elif kind is EventKind.END:
            if tag is Tag.HEADING:
                self._end_heading()
            elif tag is Tag.PARAGRAPH:
                self._end_paragraph()
            elif tag in _INLINE_MODIFIERS:
                self._pop_style()
        elif kind is EventKind.TEXT:
            self._push_span(event.text, self._effective_style())
        elif kind is EventKind.CODE:
            self._push_span(event.text, inline_code_style())
        elif kind is EventKind.SOFT_BREAK:
            self._push_span(" ", self._effective_style())
        elif kind is EventKind.HARD_BREAK:
            self._push_span("\n", self._effective_style())
        elif kind is EventKind.RULE:
            self.blocks.append(ThematicBreak())

    def _start_heading(self, level: int):
        if not 1 <= level <= 6:
            self._violation(f"heading level {level} out of range")
            level = min(max(level, 1), 6)
        self.style_stack.append(heading_style(level))
        self._start_block(StateFrame(ParserState.IN_HEADING, level=level))

    def _start_block(self, frame: StateFrame):
        self.current_spans = []
        self.state_stack.append(frame)

    def _end_heading(self):
        # Only touch the style stack once the state confirms a heading was open.
        frame = self._pop_state()
        if frame is not None and frame.state is ParserState.IN_HEADING:
            level = frame.level
            self._pop_style()
        else:
            if frame is not None:
                self._violation(f"heading end without heading state (got {frame!r})")
            level = 1
        self.blocks.append(Heading(level, self._take_spans()))

    def _end_paragraph(self):
        frame = self._pop_state()
        if frame is not None and frame.state is not ParserState.IN_PARAGRAPH:
            self._violation(f"paragraph end without paragraph state (got {frame!r})")
        self.blocks.append(Paragraph(self._take_spans()))

    def _take_spans(self) -> list[StyledSpan]:
        spans, self.current_spans = self.current_spans, []
        return spans

    def _pop_state(self) -> StateFrame | None:
        if len(self.state_stack) <= 1:
            self._violation("state stack underflow")
            return None
        return self.state_stack.pop()

    def _pop_style(self):
        if len(self.style_stack) <= 1:
            self._violation("style stack underflow")
            return
        self.style_stack.pop()

    def _effective_style(self) -> Style:
        return effective_style(self.style_stack)

    def _push_span(self, text: str, style: Style):
        self.current_spans.append(StyledSpan(text, style))

    def _violation(self, message: str):
        if self.strict:
            raise ParserInvariantError(message, self._event)
        logger.warning("Parser invariant violated: %s (event: %r)", message, self._event)


def parse_events(
    events: Iterable[Event],
    highlighter: CodeHighlighter,
    theme: str = DEFAULT_THEME,
    strict: bool = False,
) -> list[RenderedBlock]:
    """Run the block parser over an event stream.

    Args:
        events: Structural events, for example from `iter_events`.
        highlighter: Collaborator called once per code block.
        theme: Theme name handed to the highlighter.
        strict: Raise on malformed event sequences instead of recovering.

    Returns:
        list[RenderedBlock]: Blocks in document order.

    Raises:
        ParserInvariantError: If `strict` is set and the event sequence is
            malformed (an end event without its matching start).
    """
    return ParseContext(highlighter, theme, strict).process(events)


def parse_markdown(
    source: str,
    highlighter: CodeHighlighter | None = None,
    theme: str = DEFAULT_THEME,
    strict: bool = False,
) -> list[RenderedBlock]:
    """Parse Markdown source into the block IR.

    Lists, tables, block quotes and other containers are recognized and
    skipped; headings, paragraphs, code blocks and rules are rendered.

    Args:
        source: Markdown text.
        highlighter: Collaborator used for code blocks. Defaults to the shared
            `Highlighter` instance.
        theme: Theme name handed to the highlighter.
        strict: Raise on malformed event sequences instead of recovering.

    Returns:
        list[RenderedBlock]: Blocks in document order.

    Examples:
        parse_markdown("# Hello")  # [Heading(level=1, content=[StyledSpan("Hello", ...)])]
    """
    if highlighter is None:
        highlighter = default_highlighter()
    return parse_events(iter_events(source), highlighter, theme, strict)
