"""plugbus - in-process event bus with versioned plugins."""

from plugbus.core import (
    Bus,
    BusConfig,
    Listener,
    Plugin,
    PluginDescriptor,
    compare_version,
    create_plugin,
    hookimpl,
    plugin_factory,
)
from plugbus.core.errors import (
    DeferredResultError,
    DependencyCycleError,
    DuplicatePluginError,
    InvalidPluginError,
    InvalidVersionError,
    MissingDependencyError,
    PlugbusError,
    PluginError,
    UnmetVersionError,
)

__version__ = "0.1.0"

__all__ = [
    "Bus",
    "BusConfig",
    "DeferredResultError",
    "DependencyCycleError",
    "DuplicatePluginError",
    "InvalidPluginError",
    "InvalidVersionError",
    "Listener",
    "MissingDependencyError",
    "PlugbusError",
    "Plugin",
    "PluginDescriptor",
    "PluginError",
    "UnmetVersionError",
    "__version__",
    "compare_version",
    "create_plugin",
    "hookimpl",
    "plugin_factory",
]
