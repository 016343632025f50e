"""Configuration loading and management."""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
import tomllib

CONFIG_TABLE = "md-autoformat"
CONFIG_DOTFILE = ".md-autoformat.toml"


@dataclass
class AutoformatConfig:
    """Configuration for converting text files into autoformatted documents.

    Attributes:
        max_restarts: Cap on sweep restarts before giving up with a
            `ConvergenceError`. None leaves the sweep unbounded.
        horizontal_rules: Whether ``---``-style lines become horizontal rules.
        output_format: How the CLI prints the document (``"outline"`` or
            ``"json"``; ``"text"`` is accepted as an alias for ``"outline"``).
        max_file_size: Maximum file size in bytes that will be processed.
        max_line_length: Maximum line length allowed in the input.

    Examples:
        AutoformatConfig(max_restarts=1000, output_format="json")
    """

    # Engine
    max_restarts: int | None = None
    horizontal_rules: bool = True

    # Output
    output_format: str = "outline"

    # Limits
    max_file_size: int = 10 * 1024 * 1024
    max_line_length: int = 10_000


class ConfigError(ValueError):
    """Exception raised when configuration values are invalid.

    Examples:
        raise ConfigError("`max_restarts` must be >= 0")
    """


def load_config(search_path: Path) -> AutoformatConfig:
    """Load configuration from the nearest config file.

    Walks parent directories from `search_path` to the filesystem root, reading
    the ``[tool.md-autoformat]`` table from `pyproject.toml` and the
    ``[md-autoformat]`` or ``[tool.md-autoformat]`` table from
    `.md-autoformat.toml` when present. Returns default values when no
    configuration is found. TOML files that cannot be read or decoded are
    skipped.

    Args:
        search_path: Directory used as the starting point for configuration lookup.

    Returns:
        AutoformatConfig: Loaded configuration with defaults applied when necessary.

    Raises:
        ConfigError: If a config table is present but not a mapping or contains
            unsupported keys.

    Examples:
        load_config(Path("notes"))
    """
    current = search_path.resolve()

    while True:
        pyproject_config = _load_from_file(
            current / "pyproject.toml", table_paths=[("tool", CONFIG_TABLE)]
        )
        if pyproject_config is not None:
            return normalize_config(pyproject_config)

        dotfile_config = _load_from_file(
            current / CONFIG_DOTFILE,
            table_paths=[(CONFIG_TABLE,), ("tool", CONFIG_TABLE)],
        )
        if dotfile_config is not None:
            return normalize_config(dotfile_config)

        parent = current.parent
        if parent == current:
            break
        current = parent

    return AutoformatConfig()


_MISSING = object()


def _load_from_file(
    config_file: Path, table_paths: list[tuple[str, ...]]
) -> AutoformatConfig | None:
    if not config_file.exists():
        return None

    try:
        with open(config_file, "rb") as stream:
            data = tomllib.load(stream)
    except (OSError, tomllib.TOMLDecodeError):
        return None

    for table_path in table_paths:
        raw_config = _extract_table(data, table_path)
        if raw_config is _MISSING:
            continue
        return _build_config_from_raw(raw_config, config_file, table_path)

    return None


def _extract_table(data: object, table_path: tuple[str, ...]) -> object:
    current = data
    for key in table_path:
        if not isinstance(current, dict) or key not in current:
            return _MISSING
        current = current[key]
    return current


def _build_config_from_raw(
    raw_config: object, config_file: Path, table_path: tuple[str, ...]
) -> AutoformatConfig:
    table_display = ".".join(table_path)

    if not isinstance(raw_config, dict):
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}")

    if not raw_config:
        return AutoformatConfig()

    # Accept `max-restarts` as well as `max_restarts`.
    settings = {key.replace("-", "_"): value for key, value in raw_config.items()}
    try:
        return AutoformatConfig(**settings)
    except TypeError as error:
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}") from error


def normalize_config(config: AutoformatConfig) -> AutoformatConfig:
    output_format = config.output_format
    if isinstance(output_format, str):
        output_format = output_format.lower()
        if output_format == "text":
            output_format = "outline"

    return replace(config, output_format=output_format)


def validate_config(config: AutoformatConfig) -> None:
    """Validate an `AutoformatConfig` instance.

    Args:
        config: Configuration to validate.

    Returns:
        None.

    Raises:
        ConfigError: If the restart cap is negative, the output format is
            unsupported, or numeric limits are non-positive.

    Examples:
        validate_config(AutoformatConfig(max_restarts=10))
    """
    config = normalize_config(config)

    _ensure_integers(
        {
            "max_file_size": config.max_file_size,
            "max_line_length": config.max_line_length,
            **({"max_restarts": config.max_restarts} if config.max_restarts is not None else {}),
        }
    )

    if config.max_restarts is not None and config.max_restarts < 0:
        raise ConfigError("`max_restarts` must be >= 0")
    if not isinstance(config.horizontal_rules, bool):
        raise ConfigError("`horizontal_rules` must be a boolean")
    if config.output_format not in ("outline", "json"):
        raise ConfigError("`output_format` must be one of: outline, json, text")

    _ensure_positive(
        {
            "max_file_size": config.max_file_size,
            "max_line_length": config.max_line_length,
        }
    )


def apply_overrides(config: AutoformatConfig, **overrides: object) -> AutoformatConfig:
    """Apply override values to an `AutoformatConfig`.

    Args:
        config: Base configuration to update.
        overrides: Override values keyed by configuration field name; values set to
            None are ignored.

    Returns:
        AutoformatConfig: New configuration with the provided overrides applied.
        The original configuration is returned when no changes are supplied.

    Raises:
        TypeError: If an override name is not defined on `AutoformatConfig`.

    Examples:
        updated = apply_overrides(config, max_restarts=50, output_format="json")
    """
    changes = {key: value for key, value in overrides.items() if value is not None}
    if not changes:
        return config
    return replace(config, **changes)


def build_config(search_path: Path, **overrides: object) -> AutoformatConfig:
    """Load, override, and validate configuration.

    Args:
        search_path: Directory where configuration files are resolved.
        overrides: Override values keyed by configuration attributes; None values
            are ignored.

    Returns:
        AutoformatConfig: Validated configuration.

    Raises:
        ConfigError: If configuration loading or validation fails.

    Examples:
        config = build_config(Path.cwd(), max_restarts=100)
    """
    config = load_config(search_path)
    config = apply_overrides(config, **overrides)
    config = normalize_config(config)
    validate_config(config)
    return config


def _ensure_positive(values: dict[str, int]) -> None:
    for key, value in values.items():
        if value <= 0:
            raise ConfigError(f"`{key}` must be a positive integer")


def _ensure_integers(values: dict[str, object]) -> None:
    for key, value in values.items():
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigError(f"`{key}` must be an integer")
