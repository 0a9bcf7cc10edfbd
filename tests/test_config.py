from __future__ import annotations

import textwrap
import pytest
from pathlib import Path

from mdscroll.config import (
    ConfigError,
    ViewerConfig,
    apply_overrides,
    build_config,
    load_config,
    validate_config,
)


def _write_pyproject(base: Path, body: str) -> Path:
    path = base / "pyproject.toml"
    path.write_text(textwrap.dedent(body).lstrip(), encoding="utf-8")
    return path


def _write_dotfile(base: Path, body: str) -> Path:
    path = base / ".mdscroll.toml"
    path.write_text(textwrap.dedent(body).lstrip(), encoding="utf-8")
    return path


def test_defaults_when_no_config(tmp_path: Path):
    assert load_config(tmp_path) == ViewerConfig()


def test_loads_config_from_pyproject(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool.mdscroll]
        theme = "dracula"
        width = 72
        max_file_size = 1024
        max_highlight_bytes = 2048
        code_background = "grey11"
        show_status_bar = false
        """,
    )

    config = load_config(tmp_path)

    assert config == ViewerConfig(
        theme="dracula",
        width=72,
        max_file_size=1024,
        max_highlight_bytes=2048,
        code_background="grey11",
        show_status_bar=False,
    )


def test_loads_config_from_dotfile(tmp_path: Path):
    _write_dotfile(
        tmp_path,
        """
        [mdscroll]
        theme = "nord"
        """,
    )

    assert load_config(tmp_path).theme == "nord"


def test_dotfile_ignores_tool_table(tmp_path: Path):
    _write_dotfile(
        tmp_path,
        """
        [tool.mdscroll]
        width = 60
        """,
    )

    assert load_config(tmp_path) == ViewerConfig()


def test_pyproject_wins_over_dotfile_in_same_directory(tmp_path: Path):
    _write_pyproject(tmp_path, '[tool.mdscroll]\ntheme = "from-pyproject"\n')
    _write_dotfile(tmp_path, '[mdscroll]\ntheme = "from-dotfile"\n')

    assert load_config(tmp_path).theme == "from-pyproject"


def test_pyproject_without_table_is_skipped(tmp_path: Path):
    _write_pyproject(tmp_path, '[project]\nname = "x"\n')
    _write_dotfile(tmp_path, '[mdscroll]\ntheme = "nord"\n')

    assert load_config(tmp_path).theme == "nord"


def test_config_is_found_in_parent_directory(tmp_path: Path):
    _write_pyproject(tmp_path, "[tool.mdscroll]\nwidth = 50\n")
    nested = tmp_path / "docs" / "guide"
    nested.mkdir(parents=True)

    assert load_config(nested).width == 50


def test_nearest_config_wins(tmp_path: Path):
    _write_pyproject(tmp_path, "[tool.mdscroll]\nwidth = 50\n")
    nested = tmp_path / "docs"
    nested.mkdir()
    _write_dotfile(nested, "[mdscroll]\nwidth = 90\n")

    assert load_config(nested).width == 90


def test_invalid_toml_is_skipped(tmp_path: Path):
    (tmp_path / "pyproject.toml").write_text("[tool.mdscroll\n", encoding="utf-8")

    assert load_config(tmp_path) == ViewerConfig()


def test_unknown_key_raises(tmp_path: Path):
    _write_pyproject(tmp_path, "[tool.mdscroll]\ncolour = 1\n")

    with pytest.raises(ConfigError, match=r"Unknown `\[tool.mdscroll\]` settings .*: `colour`"):
        load_config(tmp_path)


def test_non_table_value_raises(tmp_path: Path):
    _write_dotfile(tmp_path, 'mdscroll = "yes"\n')

    with pytest.raises(ConfigError, match=r"\[mdscroll\]"):
        load_config(tmp_path)


def test_empty_table_uses_defaults(tmp_path: Path):
    _write_pyproject(tmp_path, "[tool.mdscroll]\n")

    assert load_config(tmp_path) == ViewerConfig()


@pytest.mark.parametrize(
    ("changes", "message"),
    [
        ({"width": 0}, "`width` must be a positive integer"),
        ({"width": "80"}, "`width` must be an integer"),
        ({"max_file_size": -1}, "`max_file_size` must be a positive integer"),
        ({"max_highlight_bytes": True}, "`max_highlight_bytes` must be an integer"),
        ({"theme": ""}, "`theme` must be a non-empty string"),
        ({"code_background": ""}, "`code_background` must be a non-empty string"),
        ({"show_status_bar": "yes"}, "`show_status_bar` must be a boolean"),
    ],
)
def test_validate_config_rejects_bad_values(changes, message):
    config = ViewerConfig(**changes)

    with pytest.raises(ConfigError, match=message):
        validate_config(config)


def test_validate_config_accepts_defaults():
    validate_config(ViewerConfig())


def test_apply_overrides_ignores_none():
    config = ViewerConfig(theme="nord")

    assert apply_overrides(config, theme=None, width=None) is config


def test_apply_overrides_replaces_values():
    config = apply_overrides(ViewerConfig(), theme="dracula", width=40)

    assert config.theme == "dracula"
    assert config.width == 40


def test_apply_overrides_rejects_unknown_field():
    with pytest.raises(TypeError):
        apply_overrides(ViewerConfig(), colour="red")


def test_build_config_applies_overrides_over_file(tmp_path: Path):
    _write_pyproject(tmp_path, '[tool.mdscroll]\ntheme = "nord"\nwidth = 50\n')

    config = build_config(tmp_path, theme="dracula")

    assert config.theme == "dracula"
    assert config.width == 50


def test_build_config_validates_overrides(tmp_path: Path):
    with pytest.raises(ConfigError):
        build_config(tmp_path, width=-3)
