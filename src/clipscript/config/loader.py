"""Configuration loading and validation."""

from pathlib import Path
from typing import Optional, Union

import yaml
from pydantic import ValidationError

from clipscript.config.schema import ClipScriptConfig
from clipscript.exceptions import ConfigError

DEFAULT_CONFIG_PATH = Path.home() / ".clipscript" / "clipscript.yaml"


def load_config(path: Optional[Path] = None) -> ClipScriptConfig:
    """Load and validate configuration from a YAML file.

    Args:
        path: Path to config file. If None, tries default location.
              If file doesn't exist, returns default config.

    Returns:
        Validated configuration object

    Raises:
        ConfigError: If config file exists but is invalid, or its
            scripts directory names something other than a directory
    """
    if path is None:
        path = DEFAULT_CONFIG_PATH

    if not path.exists():
        return ClipScriptConfig()

    try:
        with open(path, "r") as f:
            config_data = yaml.safe_load(f)

        # Handle empty file
        if config_data is None:
            return ClipScriptConfig()

        if not isinstance(config_data, dict):
            raise ConfigError(f"Expected a mapping at the top of {path}")

        config = ClipScriptConfig(**config_data)
        _resolve_scripts_directory(config, path)
        return config

    except ConfigError:
        raise
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"Configuration validation failed: {e}") from e
    except Exception as e:
        raise ConfigError(f"Failed to load config from {path}: {e}") from e


def _resolve_scripts_directory(config: ClipScriptConfig, path: Path) -> None:
    """Anchor a relative scripts directory at the config file's folder."""
    directory = Path(config.scripts.directory)
    if not config.scripts.directory.startswith("~") and not directory.is_absolute():
        directory = path.parent / directory
        config.scripts.directory = str(directory)

    directory = directory.expanduser()
    if directory.exists() and not directory.is_dir():
        raise ConfigError(f"scripts.directory is not a directory: {directory}")


def save_config(config: ClipScriptConfig, path: Optional[Union[str, Path]] = None) -> None:
    """Save configuration to YAML file.

    Args:
        config: Configuration object to save
        path: Destination path (string or Path object). If None, uses default location.
    """
    if path is None:
        path = DEFAULT_CONFIG_PATH
    elif isinstance(path, str):
        path = Path(path)

    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w") as f:
        yaml.safe_dump(config.model_dump(), f, default_flow_style=False, sort_keys=False)
