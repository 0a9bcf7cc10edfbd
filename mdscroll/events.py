"""Linear structural event stream built from markdown-it tokens.

markdown-it produces a flat block token list whose `inline` tokens carry
nested children. The parser wants a single linear stream of start/end,
text and break events, so this module flattens one into the other.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from enum import Enum, auto

from markdown_it import MarkdownIt
from markdown_it.token import Token


class EventKind(Enum):
    """Kinds of structural events."""

    START = auto()
    END = auto()
    TEXT = auto()
    CODE = auto()
    SOFT_BREAK = auto()
    HARD_BREAK = auto()
    RULE = auto()
    HTML = auto()


class Tag(Enum):
    """Constructs that can be opened and closed."""

    HEADING = auto()
    PARAGRAPH = auto()
    EMPHASIS = auto()
    STRONG = auto()
    STRIKETHROUGH = auto()
    LINK = auto()
    IMAGE = auto()
    CODE_BLOCK = auto()
    OTHER = auto()


@dataclass(frozen=True)
class Event:
    """One structural event.

    Attributes:
        kind: What happened.
        tag: Construct being opened or closed, for START and END events.
        text: Text payload for TEXT, CODE and HTML events.
        level: Heading level for heading START events.
        info: Fence info string for code block START events; None when the
            block is indented.
        name: Raw token type for `Tag.OTHER`, kept for diagnostics.
    """

    kind: EventKind
    tag: Tag | None = None
    text: str = ""
    level: int = 0
    info: str | None = None
    name: str = ""

    @classmethod
    def start(cls, tag: Tag, **fields) -> Event:
        return cls(EventKind.START, tag, **fields)

    @classmethod
    def end(cls, tag: Tag, **fields) -> Event:
        return cls(EventKind.END, tag, **fields)


_BLOCK_TAGS = {
    "heading": Tag.HEADING,
    "paragraph": Tag.PARAGRAPH,
}

_INLINE_TAGS = {
    "em": Tag.EMPHASIS,
    "strong": Tag.STRONG,
    "s": Tag.STRIKETHROUGH,
    "link": Tag.LINK,
}

_markdown = MarkdownIt("commonmark").enable(["strikethrough", "table"])


def normalize_language(info: str | None) -> str:
    """Extract the bare language identifier from a fence info string.

    Keeps the first whitespace-delimited token, then the part before the
    first comma. Indented blocks (``info is None``) have no language.

    Args:
        info: Raw fence info string.

    Returns:
        str: Language identifier, possibly empty.

    Examples:
        normalize_language("rust,no_run")  # "rust"
        normalize_language('python title="x.py"')  # "python"
    """
    if not info:
        return ""
    tokens = info.split()
    if not tokens:
        return ""
    return tokens[0].split(",", 1)[0]


def _split_type(token_type: str) -> tuple[str, str]:
    """Split ``"em_open"`` into ``("em", "open")``."""
    base, _, suffix = token_type.rpartition("_")
    return base, suffix


def _nested_event(token: Token, tags: dict[str, Tag]) -> Event | None:
    base, _ = _split_type(token.type)
    tag = tags.get(base, Tag.OTHER)
    name = token.type if tag is Tag.OTHER else ""
    if token.nesting == 1:
        if tag is Tag.HEADING:
            return Event.start(tag, level=int(token.tag[1:]))
        return Event.start(tag, name=name)
    if token.nesting == -1:
        return Event.end(tag, name=name)
    return None


def _inline_events(children: Iterable[Token]) -> Iterator[Event]:
    for child in children:
        if child.type in ("text", "text_special"):
            yield Event(EventKind.TEXT, text=child.content)
        elif child.type == "code_inline":
            yield Event(EventKind.CODE, text=child.content)
        elif child.type == "softbreak":
            yield Event(EventKind.SOFT_BREAK)
        elif child.type == "hardbreak":
            yield Event(EventKind.HARD_BREAK)
        elif child.type == "html_inline":
            yield Event(EventKind.HTML, text=child.content)
        elif child.type == "image":
            yield Event.start(Tag.IMAGE)
            yield from _inline_events(child.children or [])
            yield Event.end(Tag.IMAGE)
        else:
            event = _nested_event(child, _INLINE_TAGS)
            if event is not None:
                yield event


def events_from_tokens(tokens: Iterable[Token]) -> Iterator[Event]:
    """Flatten markdown-it block tokens into a linear event stream.

    Args:
        tokens: Tokens as returned by `MarkdownIt.parse`.

    Yields:
        Event: Structural events in document order.
    """
    for token in tokens:
        if token.type == "inline":
            yield from _inline_events(token.children or [])
        elif token.type == "fence":
            yield Event.start(Tag.CODE_BLOCK, info=token.info)
            yield Event(EventKind.TEXT, text=token.content)
            yield Event.end(Tag.CODE_BLOCK)
        elif token.type == "code_block":
            yield Event.start(Tag.CODE_BLOCK)
            yield Event(EventKind.TEXT, text=token.content)
            yield Event.end(Tag.CODE_BLOCK)
        elif token.type == "hr":
            yield Event(EventKind.RULE)
        elif token.type == "html_block":
            yield Event(EventKind.HTML, text=token.content)
        else:
            event = _nested_event(token, _BLOCK_TAGS)
            if event is not None:
                yield event


def iter_events(source: str) -> Iterator[Event]:
    """Parse Markdown source and yield its structural events.

    Args:
        source: Markdown text.

    Returns:
        Iterator[Event]: Lazily produced structural events in document order.

    Examples:
        [event.kind for event in iter_events("# Title")]
    """
    return events_from_tokens(_markdown.parse(source))
