"""Plugin registry and management."""

from plugbus.core.registry.hookspecs import PlugbusSpecs, hookimpl, hookspec
from plugbus.core.registry.manager import PluginRegistry, discover_plugins
from plugbus.core.registry.plugin import (
    Plugin,
    PluginDescriptor,
    create_plugin,
    get_descriptor,
    plugin_factory,
)
from plugbus.core.registry.version import compare_version, parse_version, validate_version

__all__ = [
    "PlugbusSpecs",
    "Plugin",
    "PluginDescriptor",
    "PluginRegistry",
    "compare_version",
    "create_plugin",
    "discover_plugins",
    "get_descriptor",
    "hookimpl",
    "hookspec",
    "parse_version",
    "plugin_factory",
    "validate_version",
]
