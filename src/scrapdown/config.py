"""Configuration loader for scrapdown.toml."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

try:
    import tomllib
except ImportError:
    import tomli as tomllib  # type: ignore

from .errors import ConfigError

CONFIG_NAME = "scrapdown.toml"


@dataclass
class TransformConfig:
    """Heading promotion settings."""
    ceiling: int = 3
    promote_single: bool = False


@dataclass
class RenderConfig:
    """Markdown output settings."""
    indent_unit: str = "   "


@dataclass
class InputConfig:
    """How to find documents inside a directory."""
    glob: str = "*.txt"


@dataclass
class ScrapdownConfig:
    """Complete scrapdown configuration."""
    transform: TransformConfig = field(default_factory=TransformConfig)
    render: RenderConfig = field(default_factory=RenderConfig)
    input: InputConfig = field(default_factory=InputConfig)
    source: Path | None = None  # file the values came from, if any


def load_config(config_path: Path | None = None, input_path: Path | None = None) -> ScrapdownConfig:
    """
    Load configuration from scrapdown.toml.

    Search order:
    1. config_path (if provided)
    2. cwd/scrapdown.toml
    3. input_path/scrapdown.toml (or its parent when input_path is a file)

    Args:
        config_path: Explicit path to config file
        input_path: Input document or directory for fallback search

    Returns:
        ScrapdownConfig with resolved settings

    Raises:
        ConfigError: If the explicit file is missing or a value is invalid
    """
    toml_data: dict[str, Any] = {}
    source = None

    if config_path is not None and not config_path.exists():
        raise ConfigError(f"Config file not found: {config_path}")

    # Search for config file
    search_paths = []
    if config_path:
        search_paths.append(config_path)
    search_paths.append(Path.cwd() / CONFIG_NAME)
    if input_path:
        base = input_path if input_path.is_dir() else input_path.parent
        search_paths.append(base / CONFIG_NAME)

    for path in search_paths:
        if path.exists():
            try:
                with open(path, "rb") as f:
                    toml_data = tomllib.load(f)
            except tomllib.TOMLDecodeError as e:
                raise ConfigError(f"Invalid TOML in {path}: {e}") from e
            source = path
            break

    transform_data = toml_data.get("transform", {})
    transform = TransformConfig(
        ceiling=transform_data.get("ceiling", 3),
        promote_single=transform_data.get("promote_single", False),
    )

    render_data = toml_data.get("render", {})
    render = RenderConfig(
        indent_unit=render_data.get("indent_unit", "   "),
    )

    input_data = toml_data.get("input", {})
    input_config = InputConfig(
        glob=input_data.get("glob", "*.txt"),
    )

    config = ScrapdownConfig(
        transform=transform,
        render=render,
        input=input_config,
        source=source,
    )
    validate_config(config)
    return config


def validate_config(config: ScrapdownConfig) -> None:
    """Raise ConfigError if any value is out of range."""
    ceiling = config.transform.ceiling
    # bool is an int subclass; reject it explicitly
    if isinstance(ceiling, bool) or not isinstance(ceiling, int) or not 0 <= ceiling <= 255:
        raise ConfigError(f"transform.ceiling must be an integer in 0..255, got {ceiling!r}")

    if not isinstance(config.transform.promote_single, bool):
        raise ConfigError(
            f"transform.promote_single must be true or false, got {config.transform.promote_single!r}"
        )

    if not isinstance(config.render.indent_unit, str):
        raise ConfigError(
            f"render.indent_unit must be a string, got {config.render.indent_unit!r}"
        )

    if not isinstance(config.input.glob, str) or not config.input.glob:
        raise ConfigError(f"input.glob must be a non-empty string, got {config.input.glob!r}")
