"""Constants used across the mdscroll package."""

from __future__ import annotations

# Highlighting
DEFAULT_THEME = "monokai"
MAX_HIGHLIGHT_BYTES = 512 * 1024

# Loading
DEFAULT_MAX_FILE_SIZE = 100 * 1024 * 1024
MAX_FILE_SIZE_ENV_VAR = "MDSCROLL_MAX_FILE_SIZE"
STDIN_PATH = "-"

# Presentation
CODE_BACKGROUND = "color(235)"
RULE_CHARACTER = "─"
STATUS_BAR_STYLE = "bold black on white"

# Pager
RESIZE_POLL_SECONDS = 0.1
