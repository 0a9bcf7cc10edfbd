"""Configuration loading and management."""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from pathlib import Path
import tomllib

from .constants import CODE_BACKGROUND, DEFAULT_MAX_FILE_SIZE, DEFAULT_THEME, MAX_HIGHLIGHT_BYTES

# Files searched in each directory, nearest first, and the table holding settings.
CONFIG_SOURCES = (
    ("pyproject.toml", ("tool", "mdscroll")),
    (".mdscroll.toml", ("mdscroll",)),
)


@dataclass
class ViewerConfig:
    """Configuration for viewing Markdown documents.

    Attributes:
        theme: pygments style used for code blocks.
        width: Fixed layout width in cells; None follows the terminal width.
        max_file_size: Maximum document size in bytes that will be loaded.
        max_highlight_bytes: Largest code block, in UTF-8 bytes, that is
            syntax highlighted.
        code_background: rich color painted behind code lines.
        show_status_bar: Whether the pager draws the bottom status bar.

    Examples:
        ViewerConfig(theme="dracula", width=100)
    """

    theme: str = DEFAULT_THEME
    width: int | None = None

    # Limits
    max_file_size: int = DEFAULT_MAX_FILE_SIZE
    max_highlight_bytes: int = MAX_HIGHLIGHT_BYTES

    # Presentation
    code_background: str = CODE_BACKGROUND
    show_status_bar: bool = True


class ConfigError(ValueError):
    """Exception raised when configuration values are invalid.

    Examples:
        raise ConfigError("`width` must be a positive integer")
    """


def load_config(search_path: Path) -> ViewerConfig:
    """Load configuration from the nearest config file.

    Walks from `search_path` up to the filesystem root. In each directory the
    ``[tool.mdscroll]`` table of `pyproject.toml` is tried first, then the
    ``[mdscroll]`` table of `.mdscroll.toml`. The first table found wins;
    files without the table, and TOML that cannot be read or decoded, are
    skipped.

    Args:
        search_path: Directory used as the starting point for configuration lookup.

    Returns:
        ViewerConfig: Loaded configuration, or defaults when nothing is found.

    Raises:
        ConfigError: If a table is present but not a mapping or holds
            settings `ViewerConfig` does not know.

    Examples:
        load_config(Path("docs"))
    """
    for directory in (search_path.resolve(), *search_path.resolve().parents):
        for filename, table_path in CONFIG_SOURCES:
            settings = _read_table(directory / filename, table_path)
            if settings is not None:
                return _config_from_table(settings, directory / filename, table_path)
    return ViewerConfig()


def _read_table(config_file: Path, table_path: tuple[str, ...]) -> object | None:
    if not config_file.is_file():
        return None

    try:
        with open(config_file, "rb") as stream:
            table: object = tomllib.load(stream)
    except (OSError, tomllib.TOMLDecodeError):
        return None

    for key in table_path:
        if not isinstance(table, dict) or key not in table:
            return None
        table = table[key]
    return table


def _config_from_table(
    settings: object, config_file: Path, table_path: tuple[str, ...]
) -> ViewerConfig:
    table_name = ".".join(table_path)
    if not isinstance(settings, dict):
        raise ConfigError(f"Invalid `[{table_name}]` settings in {config_file}")

    known = {field.name for field in fields(ViewerConfig)}
    unknown = sorted(set(settings) - known)
    if unknown:
        names = ", ".join(f"`{name}`" for name in unknown)
        raise ConfigError(f"Unknown `[{table_name}]` settings in {config_file}: {names}")
    return ViewerConfig(**settings)


def validate_config(config: ViewerConfig) -> None:
    """Validate a `ViewerConfig` instance.

    Raises:
        ConfigError: If the theme or background is empty, a size or the width
            is not a positive integer, or `show_status_bar` is not a boolean.
    """
    sizes = {
        "max_file_size": config.max_file_size,
        "max_highlight_bytes": config.max_highlight_bytes,
    }
    if config.width is not None:
        sizes["width"] = config.width
    for name, value in sizes.items():
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigError(f"`{name}` must be an integer")
        if value <= 0:
            raise ConfigError(f"`{name}` must be a positive integer")

    for name in ("theme", "code_background"):
        value = getattr(config, name)
        if not isinstance(value, str) or not value:
            raise ConfigError(f"`{name}` must be a non-empty string")
    if not isinstance(config.show_status_bar, bool):
        raise ConfigError("`show_status_bar` must be a boolean")


def apply_overrides(config: ViewerConfig, **overrides: object) -> ViewerConfig:
    """Return `config` with every override that is not None applied.

    Raises:
        TypeError: If an override is not a `ViewerConfig` field.
    """
    changes = {name: value for name, value in overrides.items() if value is not None}
    return replace(config, **changes) if changes else config


def build_config(search_path: Path, **overrides: object) -> ViewerConfig:
    """Load configuration, apply command line overrides, and validate.

    Args:
        search_path: Directory where configuration lookup starts.
        overrides: Values keyed by `ViewerConfig` field name; None means the
            option was not given and the loaded value is kept.

    Returns:
        ViewerConfig: Validated configuration.

    Raises:
        ConfigError: If loading or validation fails.
        TypeError: If an override is not a `ViewerConfig` field.

    Examples:
        config = build_config(Path.cwd(), theme="monokai", width=None)
    """
    config = apply_overrides(load_config(search_path), **overrides)
    validate_config(config)
    return config
