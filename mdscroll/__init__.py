"""
mdscroll: scrollable Markdown viewer for the terminal.

This package can be used both as a CLI tool and as a library.

CLI Usage:
    mdscroll README.md

Library Usage:
    from pathlib import Path
    from mdscroll import flatten, parse_markdown

    blocks = parse_markdown(Path("README.md").read_text())
    document = flatten(blocks, width=80)
    for line in document.lines:
        ...
"""

from .exceptions import FileTooLargeError, MdscrollError, ParserInvariantError
from .highlight import Highlighter, available_themes
from .layout import build_spans_for_range, flatten, split_hard_breaks, wrap_styled_spans
from .models import (
    CodeBlock,
    CodeLine,
    EmptyLine,
    Heading,
    Paragraph,
    PreRenderedDocument,
    RuleLine,
    Spacer,
    StyledSpan,
    TextLine,
    ThematicBreak,
)
from .parser import parse_events, parse_markdown
from .viewer import Key, Viewer
from .wrap import wrap_text

__version__ = "0.1.0"

__all__ = [
    # Core functionality
    "parse_markdown",
    "parse_events",
    "flatten",
    "wrap_styled_spans",
    "wrap_text",
    "build_spans_for_range",
    "split_hard_breaks",
    "Highlighter",
    "available_themes",
    "Viewer",
    "Key",
    # Data models
    "StyledSpan",
    "Heading",
    "Paragraph",
    "CodeBlock",
    "ThematicBreak",
    "Spacer",
    "TextLine",
    "CodeLine",
    "EmptyLine",
    "RuleLine",
    "PreRenderedDocument",
    # Exceptions
    "MdscrollError",
    "ParserInvariantError",
    "FileTooLargeError",
    # Version
    "__version__",
]
