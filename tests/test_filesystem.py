from __future__ import annotations

import io
from pathlib import Path

import pytest

from mdscroll.constants import MAX_FILE_SIZE_ENV_VAR
from mdscroll.exceptions import FileTooLargeError, MdscrollError
from mdscroll.filesystem import (
    collect_file_stat,
    display_name,
    enforce_file_size,
    get_max_file_size,
    read_source,
    sanitize_filename,
)


def test_get_max_file_size_uses_default(monkeypatch):
    monkeypatch.delenv(MAX_FILE_SIZE_ENV_VAR, raising=False)

    assert get_max_file_size(default=123) == 123


def test_get_max_file_size_reads_environment(monkeypatch):
    monkeypatch.setenv(MAX_FILE_SIZE_ENV_VAR, "2048")

    assert get_max_file_size(default=123) == 2048


@pytest.mark.parametrize("value", ["abc", "0", "-5"])
def test_get_max_file_size_rejects_bad_values(monkeypatch, value):
    monkeypatch.setenv(MAX_FILE_SIZE_ENV_VAR, value)

    with pytest.raises(ValueError, match=MAX_FILE_SIZE_ENV_VAR):
        get_max_file_size()


def test_read_source_reads_utf8(tmp_path: Path):
    path = tmp_path / "doc.md"
    path.write_text("# Título\n", encoding="utf-8")

    assert read_source(str(path), 1024) == "# Título\n"


def test_read_source_rejects_large_file(tmp_path: Path):
    path = tmp_path / "big.md"
    path.write_bytes(b"x" * 100)

    with pytest.raises(FileTooLargeError) as excinfo:
        read_source(str(path), 99)

    assert excinfo.value.size == 100
    assert excinfo.value.limit == 99
    assert "file too large" in str(excinfo.value)


def test_file_too_large_is_package_error():
    assert issubclass(FileTooLargeError, MdscrollError)
    assert issubclass(MdscrollError, ValueError)


def test_read_source_accepts_file_at_limit(tmp_path: Path):
    path = tmp_path / "edge.md"
    path.write_bytes(b"x" * 10)

    assert read_source(str(path), 10) == "x" * 10


def test_read_source_rejects_invalid_utf8(tmp_path: Path):
    path = tmp_path / "latin1.md"
    path.write_bytes(b"caf\xe9\n")

    with pytest.raises(IOError, match="not valid UTF-8"):
        read_source(str(path), 1024)


def test_read_source_missing_file(tmp_path: Path):
    with pytest.raises(IOError, match="Error accessing"):
        read_source(str(tmp_path / "missing.md"), 1024)


def test_read_source_rejects_directory(tmp_path: Path):
    with pytest.raises(IOError, match="not a regular file"):
        collect_file_stat(tmp_path)


def test_read_source_from_stdin():
    stream = io.BytesIO("hello *world*\n".encode("utf-8"))

    assert read_source("-", 1024, stream) == "hello *world*\n"


def test_read_source_from_stdin_enforces_limit():
    stream = io.BytesIO(b"y" * 50)

    with pytest.raises(FileTooLargeError):
        read_source("-", 10, stream)


def test_enforce_file_size_allows_equal_size():
    enforce_file_size(5, 5, "doc.md")


def test_sanitize_filename_strips_control_characters():
    assert sanitize_filename("evil\x1b[2J\x07name.md") == "evil[2Jname.md"
    assert sanitize_filename("ünïcode.md") == "ünïcode.md"


def test_display_name():
    assert display_name("-") == "<stdin>"
    assert display_name("docs/guide.md") == "guide.md"
    assert display_name("docs/bad\x1bname.md") == "badname.md"
