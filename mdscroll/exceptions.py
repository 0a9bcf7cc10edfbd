"""Package-specific exception types."""

from __future__ import annotations

from pathlib import Path


class MdscrollError(ValueError):
    """Base class for mdscroll errors."""


class ParserInvariantError(MdscrollError):
    """Raised in strict mode when the event stream breaks a parser invariant.

    Outside strict mode the same conditions are logged and recovered from.

    Args:
        message: Description of the violated invariant.
        event: The event being processed when the violation was detected.
    """

    def __init__(self, message: str, event: object | None = None):
        self.event = event
        super().__init__(message)


class FileTooLargeError(MdscrollError):
    """Raised when a document exceeds the configured size limit.

    Args:
        path: Path of the offending document.
        size: Actual size in bytes.
        limit: Maximum allowed size in bytes.
    """

    def __init__(self, path: Path | str, size: int, limit: int):
        self.path = path
        self.size = size
        self.limit = limit
        super().__init__(f"{path}: file too large ({size} bytes; limit is {limit} bytes)")
