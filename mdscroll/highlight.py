"""Syntax highlighting for code blocks.

Wraps pygments behind a single `Highlighter` type so that lexer and style
objects never leak into the parser or layout. Lexers, styles and resolved
token styles are cached on the instance, so one highlighter should be created
per process and reused for every code block.
"""

from __future__ import annotations

import functools
import logging

from pygments.lexer import Lexer
from pygments.lexers import get_lexer_by_name
from pygments.lexers.special import TextLexer
from pygments.style import StyleMeta
from pygments.styles import get_all_styles, get_style_by_name
from pygments.token import Comment, Token, _TokenType
from pygments.util import ClassNotFound
from rich.style import Style

from .constants import DEFAULT_THEME, MAX_HIGHLIGHT_BYTES
from .models import StyledLine, StyledSpan

logger = logging.getLogger(__name__)


def normalize_newlines(code: str) -> str:
    return code.replace("\r\n", "\n").replace("\r", "\n")


def plain_lines(code: str) -> list[StyledLine]:
    """Split code into unstyled lines without line-ending characters.

    Only ``\\n``, ``\\r\\n`` and ``\\r`` end a line, matching what the
    highlighted path produces for the same input.
    """
    parts = normalize_newlines(code).split("\n")
    if parts[-1] == "":
        parts.pop()
    return [[StyledSpan(part)] if part else [] for part in parts]


def available_themes() -> list[str]:
    """Return the names of all installed pygments styles, sorted."""
    return sorted(get_all_styles())


class Highlighter:
    """Turns raw code into styled display lines.

    Never raises for bad input: an unknown language falls back to plain text,
    an unknown theme falls back to `DEFAULT_THEME`, and input larger than
    `max_bytes` is returned unstyled without being tokenized.

    Args:
        max_bytes: Largest UTF-8 encoded input that will be tokenized.

    Examples:
        highlighter = Highlighter()
        lines = highlighter.highlight("print(1)\\n", "python", "monokai")
    """

    def __init__(self, max_bytes: int = MAX_HIGHLIGHT_BYTES):
        self.max_bytes = max_bytes
        self._lexers: dict[str, Lexer] = {}
        self._themes: dict[str, StyleMeta | None] = {}
        self._token_styles: dict[tuple[str, _TokenType], Style] = {}

    def highlight(self, code: str, language: str, theme: str) -> list[StyledLine]:
        """Highlight a code block.

        Args:
            code: Raw code text, usually ending with a newline.
            language: Language token such as ``"python"`` or ``"rs"``; empty
                for plain text.
            theme: pygments style name.

        Returns:
            list[StyledLine]: One styled line per source line, with no
                ``\\r`` or ``\\n`` characters in any span.
        """
        if not code:
            return []

        if len(code.encode("utf-8")) > self.max_bytes:
            logger.debug(
                "Code block exceeds %d bytes; rendering without highlighting", self.max_bytes
            )
            return plain_lines(code)

        theme_name, style_cls = self._resolve_theme(theme)
        if style_cls is None:
            return plain_lines(code)

        lexer = self._resolve_lexer(language)
        source = normalize_newlines(code)
        try:
            return self._tokenize(source, lexer, theme_name, style_cls)
        except Exception:
            logger.warning("Highlighting failed for language %r", language, exc_info=True)
            return plain_lines(code)

    def _tokenize(
        self, source: str, lexer: Lexer, theme_name: str, style_cls: StyleMeta
    ) -> list[StyledLine]:
        lines: list[StyledLine] = [[]]
        for token_type, value in lexer.get_tokens(source):
            style = self._token_style(theme_name, style_cls, token_type)
            for index, part in enumerate(value.split("\n")):
                if index:
                    lines.append([])
                if part:
                    lines[-1].append(StyledSpan(part, style))

        # The lexer guarantees a trailing newline, which opens one empty line too many.
        if not lines[-1]:
            lines.pop()
        return lines

    def _resolve_lexer(self, language: str) -> Lexer:
        lexer = self._lexers.get(language)
        if lexer is not None:
            return lexer

        if not language:
            lexer = TextLexer(stripnl=False)
        else:
            try:
                lexer = get_lexer_by_name(language, stripnl=False, ensurenl=True)
            except ClassNotFound:
                logger.debug("Unknown language %r; rendering as plain text", language)
                lexer = TextLexer(stripnl=False)
        self._lexers[language] = lexer
        return lexer

    def _resolve_theme(self, theme: str) -> tuple[str, StyleMeta | None]:
        for name in (theme, DEFAULT_THEME):
            if name not in self._themes:
                try:
                    self._themes[name] = get_style_by_name(name)
                except ClassNotFound:
                    logger.debug("Unknown theme %r", name)
                    self._themes[name] = None
            style_cls = self._themes[name]
            if style_cls is not None:
                return name, style_cls
        return theme, None

    def _token_style(
        self, theme_name: str, style_cls: StyleMeta, token_type: _TokenType
    ) -> Style:
        key = (theme_name, token_type)
        style = self._token_styles.get(key)
        if style is None:
            force_italic = token_type in Comment and comment_color(style_cls) is not None
            style = pygments_to_rich(style_cls.style_for_token(token_type), force_italic)
            self._token_styles[key] = style
        return style


def comment_color(style_cls: StyleMeta) -> str | None:
    """Return the comment color of a theme when it differs from plain text.

    Themes that give comments a distinct color get comments rendered in
    italics as well; themes that do not are left alone.
    """
    comment = style_cls.style_for_token(Comment)["color"]
    default = style_cls.style_for_token(Token)["color"]
    if not comment or comment == default:
        return None
    return comment


def pygments_to_rich(token_style: dict, force_italic: bool = False) -> Style:
    """Convert a pygments ``style_for_token`` mapping into a rich `Style`."""
    color = token_style.get("color")
    bgcolor = token_style.get("bgcolor")
    return Style(
        color=f"#{color}" if color else None,
        bgcolor=f"#{bgcolor}" if bgcolor else None,
        bold=True if token_style.get("bold") else None,
        italic=True if token_style.get("italic") or force_italic else None,
        underline=True if token_style.get("underline") else None,
    )


@functools.lru_cache(maxsize=None)
def default_highlighter() -> Highlighter:
    """Return the process-wide shared `Highlighter`."""
    return Highlighter()
