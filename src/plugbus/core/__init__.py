"""Core module - bus, listeners, emission strategies and plugin registry."""

from plugbus.core.events.bus import Bus
from plugbus.core.events.listeners import Listener
from plugbus.core.models.config import BusConfig
from plugbus.core.registry.hookspecs import hookimpl
from plugbus.core.registry.plugin import Plugin, PluginDescriptor, create_plugin, plugin_factory
from plugbus.core.registry.version import compare_version

__all__ = [
    "Bus",
    "BusConfig",
    "Listener",
    "Plugin",
    "PluginDescriptor",
    "compare_version",
    "create_plugin",
    "hookimpl",
    "plugin_factory",
]
