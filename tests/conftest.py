import logging

import pytest
from click.testing import CliRunner

from mdscroll.highlight import Highlighter, plain_lines


@pytest.fixture()
def cli_runner() -> CliRunner:
    """Provides a reusable Click CLI runner."""
    return CliRunner()


@pytest.fixture(scope="session")
def highlighter() -> Highlighter:
    """Shares one highlighter (and its lexer cache) across the test session."""
    return Highlighter()


class RecordingHighlighter:
    """Highlighter double that records its calls and returns plain lines."""

    def __init__(self):
        self.calls: list[tuple[str, str, str]] = []

    def highlight(self, code: str, language: str, theme: str):
        self.calls.append((code, language, theme))
        return plain_lines(code)


@pytest.fixture()
def recording_highlighter() -> RecordingHighlighter:
    return RecordingHighlighter()


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Drops handlers the CLI installs so they do not outlive a test's streams."""
    logger = logging.getLogger("mdscroll")
    yield
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
