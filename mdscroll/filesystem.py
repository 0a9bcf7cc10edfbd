"""Filesystem helpers for mdscroll."""

from __future__ import annotations

import os
import stat
import sys
import unicodedata
from pathlib import Path
from typing import BinaryIO

from .constants import DEFAULT_MAX_FILE_SIZE, MAX_FILE_SIZE_ENV_VAR, STDIN_PATH
from .exceptions import FileTooLargeError


def get_max_file_size(default: int = DEFAULT_MAX_FILE_SIZE) -> int:
    """Resolve the maximum allowed document size.

    Args:
        default: Fallback value in bytes when the environment variable is unset.

    Returns:
        int: Maximum allowed size in bytes.

    Raises:
        ValueError: If the environment value is not a positive integer.

    Examples:
        os.environ["MDSCROLL_MAX_FILE_SIZE"] = "204800"
        limit = get_max_file_size(default=102400)
    """
    env_value = os.environ.get(MAX_FILE_SIZE_ENV_VAR)
    if env_value is None:
        return default

    try:
        max_size = int(env_value)
    except ValueError as error:
        error_message = (
            f"Invalid value for {MAX_FILE_SIZE_ENV_VAR}: {env_value} (expected positive integer)"
        )
        raise ValueError(error_message) from error

    if max_size <= 0:
        error_message = f"{MAX_FILE_SIZE_ENV_VAR} must be a positive integer, got {max_size}."
        raise ValueError(error_message)

    return max_size


def collect_file_stat(filepath: Path) -> os.stat_result:
    """Return stat information for a document, following symlinks.

    Args:
        filepath: Path to the file.

    Returns:
        os.stat_result: File metadata.

    Raises:
        IOError: If the path is inaccessible or not a regular file.
    """
    try:
        stat_result = os.stat(filepath)
    except OSError as error:
        error_message = f"Error accessing {filepath}: {error}"
        raise IOError(error_message) from error

    if not stat.S_ISREG(stat_result.st_mode):
        error_message = f"{filepath} is not a regular file."
        raise IOError(error_message)

    return stat_result


def enforce_file_size(size: int, max_size: int, filepath: Path | str):
    """Guard against documents that exceed the configured maximum size.

    Raises:
        FileTooLargeError: If `size` exceeds `max_size`.

    Examples:
        enforce_file_size(os.stat("README.md").st_size, 102400, Path("README.md"))
    """
    if size > max_size:
        raise FileTooLargeError(filepath, size, max_size)


def decode_source(data: bytes, filepath: Path | str) -> str:
    """Decode document bytes as UTF-8.

    Raises:
        IOError: If the bytes are not valid UTF-8.
    """
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as error:
        error_message = f"{filepath} is not valid UTF-8: {error.reason} at byte {error.start}"
        raise IOError(error_message) from error


def safe_read(filepath: Path) -> bytes:
    """Read a file's bytes with consistent error handling.

    Raises:
        IOError: If the path is missing, inaccessible, or not a file.
    """
    try:
        with open(filepath, "rb") as stream:
            return stream.read()
    except (
        FileNotFoundError,
        PermissionError,
        IsADirectoryError,
        NotADirectoryError,
    ) as error:
        error_message = f"Error accessing {filepath}: {error}"
        raise IOError(error_message) from error


def read_stdin(max_size: int, stream: BinaryIO | None = None) -> str:
    """Read a document from standard input.

    At most ``max_size + 1`` bytes are read, which is enough to tell that the
    input is too large without buffering all of it.

    Raises:
        FileTooLargeError: If the input is larger than `max_size`.
        IOError: If the input is not valid UTF-8.
    """
    if stream is None:
        stream = sys.stdin.buffer
    data = stream.read(max_size + 1)
    enforce_file_size(len(data), max_size, "<stdin>")
    return decode_source(data, "<stdin>")


def read_source(raw_path: str, max_size: int, stdin: BinaryIO | None = None) -> str:
    """Load a Markdown document from a path, or from stdin for ``-``.

    The size limit is checked against the file metadata before anything is
    read.

    Args:
        raw_path: User-supplied path, or ``-`` for standard input.
        max_size: Maximum allowed size in bytes.
        stdin: Binary stream used for ``-``; defaults to `sys.stdin`.

    Returns:
        str: Decoded document text.

    Raises:
        FileTooLargeError: If the document exceeds `max_size`.
        IOError: If the file cannot be read or is not valid UTF-8.

    Examples:
        source = read_source("README.md", 100 * 1024 * 1024)
    """
    if raw_path == STDIN_PATH:
        return read_stdin(max_size, stdin)

    filepath = Path(raw_path).expanduser()
    stat_result = collect_file_stat(filepath)
    enforce_file_size(stat_result.st_size, max_size, filepath)
    data = safe_read(filepath)
    # The file may have grown since it was stat'ed.
    enforce_file_size(len(data), max_size, filepath)
    return decode_source(data, filepath)


def sanitize_filename(name: str) -> str:
    """Strip control characters so a file name is safe to print to a terminal.

    Examples:
        sanitize_filename("evil\\x1b[2Jname.md")  # "evil[2Jname.md"
    """
    return "".join(char for char in name if unicodedata.category(char) != "Cc")


def display_name(raw_path: str) -> str:
    """Name shown in the status bar for a document path."""
    if raw_path == STDIN_PATH:
        return "<stdin>"
    return sanitize_filename(Path(raw_path).name or raw_path)
