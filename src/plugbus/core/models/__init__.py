"""Configuration models."""

from plugbus.core.models.config import BusConfig, LoggingConfig, PluginConfig

__all__ = ["BusConfig", "LoggingConfig", "PluginConfig"]
