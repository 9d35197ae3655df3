"""Configuration for clipscript."""

from clipscript.config.loader import DEFAULT_CONFIG_PATH, load_config, save_config
from clipscript.config.schema import ClipScriptConfig, LoggingConfig, SaverConfig, ScriptsConfig
from clipscript.exceptions import ConfigError

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "ClipScriptConfig",
    "ConfigError",
    "LoggingConfig",
    "SaverConfig",
    "ScriptsConfig",
    "load_config",
    "save_config",
]
