"""Configuration models using Pydantic."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class LoggingConfig(BaseModel):
    """Structured logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    json_output: bool = False
    colors: bool = True


class PluginConfig(BaseModel):
    """Plugin discovery configuration."""

    entry_point_group: str = Field(default="plugbus.plugins", min_length=1)
    autoload: bool = False  # Install every advertised plugin when the bus is created


class BusConfig(BaseSettings):
    """Main bus configuration."""

    model_config = SettingsConfigDict(
        env_prefix="PLUGBUS_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    plugins: PluginConfig = Field(default_factory=PluginConfig)

    @classmethod
    def from_yaml(cls, path: Path | str) -> BusConfig:
        """
        Load settings from a YAML document.

        Values in the file win over ``PLUGBUS_*`` environment variables;
        anything the file leaves out still comes from the environment or
        the defaults. An empty file yields the same result as ``BusConfig()``.

        Raises:
            FileNotFoundError: If ``path`` does not exist
            ValueError: If the document is not a mapping
        """
        data = yaml.safe_load(Path(path).read_text()) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Expected a mapping at the top of {path}, got {type(data).__name__}")
        return cls(**data)
