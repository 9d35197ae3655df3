"""Pydantic models for clipscript.yaml configuration."""

from typing import Literal

from pydantic import BaseModel, Field


class ScriptsConfig(BaseModel):
    """Script plugin discovery configuration."""

    enabled: bool = Field(default=True, description="Load script plugins")
    directory: str = Field(
        default="~/.clipscript/scripts",
        description="Directory scanned for plugin scripts",
    )
    pattern: str = Field(default="*.py", description="Glob pattern for script files")
    blocked: list[str] = Field(
        default_factory=list,
        description="Plugin ids that are never loaded",
    )
    encoding: str = Field(default="utf-8", description="Encoding of script files")


class SaverConfig(BaseModel):
    """Built-in saver configuration."""

    formats_to_save: list[str] = Field(
        default=["text/plain", "text/html", "text/uri-list"],
        description="Formats always saved in addition to those requested by plugins",
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Minimum level of messages shown",
    )


class ClipScriptConfig(BaseModel):
    """Root configuration model."""

    scripts: ScriptsConfig = Field(default_factory=ScriptsConfig)
    saver: SaverConfig = Field(default_factory=SaverConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
