"""Plugin registry: dependency checks, installation and lifecycle hooks."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from importlib.metadata import entry_points
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

import pluggy
import structlog

from plugbus.core.errors import (
    DependencyCycleError,
    DuplicatePluginError,
    InvalidPluginError,
    MissingDependencyError,
    UnmetVersionError,
)
from plugbus.core.registry.hookspecs import PROJECT_NAME, PlugbusSpecs
from plugbus.core.registry.plugin import Plugin, PluginDescriptor, get_descriptor
from plugbus.core.registry.version import compare_version

if TYPE_CHECKING:
    from plugbus.core.events.bus import Bus

logger = structlog.get_logger(__name__)

DEFAULT_ENTRY_POINT_GROUP = "plugbus.plugins"


def discover_plugins(group: str = DEFAULT_ENTRY_POINT_GROUP) -> list[Plugin]:
    """
    Load plugins advertised by installed distributions.

    A distribution advertises a plugin with an entry point such as::

        [project.entry-points."plugbus.plugins"]
        auth = "my_package.plugins:auth"

    Args:
        group: Entry point group to scan

    Returns:
        Loaded plugins, in entry point order

    Raises:
        InvalidPluginError: If an entry point does not resolve to a plugin
    """
    plugins: list[Plugin] = []

    for entry_point in entry_points(group=group):
        loaded = entry_point.load()
        try:
            descriptor = get_descriptor(loaded)
        except InvalidPluginError:
            raise InvalidPluginError(
                f"Entry point '{entry_point.name}' ({entry_point.value}) is not a plugin"
            ) from None

        plugins.append(loaded)
        logger.debug(
            "Plugin discovered",
            entry_point=entry_point.name,
            name=descriptor.name,
            version=descriptor.version,
        )

    return plugins


class PluginRegistry:
    """Records installed plugins for one bus."""

    def __init__(self, bus: Bus) -> None:
        """
        Initialize the registry.

        Args:
            bus: Bus handed to every plugin body on installation
        """
        self._bus = bus
        self._installed: dict[str, PluginDescriptor] = {}

        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(PlugbusSpecs)

    @property
    def installed(self) -> Mapping[str, PluginDescriptor]:
        """Read-only view of installed descriptors by name."""
        return MappingProxyType(self._installed)

    def is_installed(self, name: str) -> bool:
        """Check if a plugin is installed."""
        return name in self._installed

    def get(self, name: str) -> PluginDescriptor | None:
        """Get the descriptor of an installed plugin."""
        return self._installed.get(name)

    def list_plugins(self) -> list[str]:
        """List installed plugin names in installation order."""
        return list(self._installed.keys())

    # =========================================================================
    # Hooks
    # =========================================================================

    def add_hooks(self, observer: Any, name: str | None = None) -> None:
        """
        Register an object implementing lifecycle hooks.

        Args:
            observer: Object or module with ``@hookimpl`` methods
            name: Optional registration name
        """
        self._pm.register(observer, name=name)
        logger.debug("Hook observer registered", name=self._pm.get_name(observer))

    def remove_hooks(self, observer: Any) -> None:
        """Unregister a lifecycle hook observer."""
        if self._pm.is_registered(observer):
            self._pm.unregister(observer)

    # =========================================================================
    # Installation
    # =========================================================================

    def check(self, descriptor: PluginDescriptor) -> None:
        """
        Validate that a plugin can be installed.

        Raises:
            DuplicatePluginError: If the name is already installed
            MissingDependencyError: If a dependency is not installed
            UnmetVersionError: If an installed dependency is too old
        """
        if descriptor.name in self._installed:
            raise DuplicatePluginError(descriptor.name)

        for dependency, required in descriptor.dependencies.items():
            provided = self._installed.get(dependency)
            if provided is None:
                raise MissingDependencyError(descriptor.name, dependency)

            if compare_version(required, provided.version) > 0:
                raise UnmetVersionError(descriptor.name, dependency, required, provided.version)

    def install(self, plugin: Plugin, options: Any = None) -> None:
        """
        Install a plugin.

        Dependencies are validated before the plugin body runs. The
        descriptor is recorded only once the body returned; a body that
        raises leaves its side effects in place and nothing recorded.

        Args:
            plugin: Plugin built with create_plugin()
            options: Passed through to the plugin body
        """
        descriptor = get_descriptor(plugin)
        self.check(descriptor)

        try:
            plugin(self._bus, options)
        except Exception as e:
            logger.error(
                "Plugin installation failed",
                name=descriptor.name,
                version=descriptor.version,
                error=str(e),
            )
            try:
                self._pm.hook.plugbus_plugin_failed(bus=self._bus, descriptor=descriptor, error=e)
            except Exception as hook_error:
                # The body's error is what the installer must see
                logger.error(
                    "Plugin failure hook raised",
                    name=descriptor.name,
                    error=str(hook_error),
                )
            raise

        self._installed[descriptor.name] = descriptor
        logger.info("Plugin installed", name=descriptor.name, version=descriptor.version)

        self._pm.hook.plugbus_plugin_installed(bus=self._bus, descriptor=descriptor)

    def install_all(self, plugins: Iterable[Plugin], options: Any = None) -> list[str]:
        """
        Install a batch of plugins in dependency order.

        Dependencies found in the same batch are installed before their
        dependents; otherwise the given order is kept.

        Args:
            plugins: Plugins to install
            options: Passed through to every plugin body

        Returns:
            Names of the installed plugins, in installation order

        Raises:
            DependencyCycleError: If plugins in the batch depend on each other
                circularly; raised before any plugin body runs
        """
        ordered = self._resolve_order(plugins)

        for plugin in ordered:
            self.install(plugin, options)

        return [get_descriptor(plugin).name for plugin in ordered]

    def _resolve_order(self, plugins: Iterable[Plugin]) -> list[Plugin]:
        """Order a batch so that in-batch dependencies come first."""
        batch: dict[str, Plugin] = {}
        for plugin in plugins:
            name = get_descriptor(plugin).name
            if name in batch:
                raise DuplicatePluginError(name)
            batch[name] = plugin

        ordered: list[Plugin] = []
        done: set[str] = set()
        visiting: list[str] = []

        def visit(name: str) -> None:
            if name in done:
                return
            if name in visiting:
                raise DependencyCycleError(visiting[visiting.index(name) :])

            visiting.append(name)
            for dependency in get_descriptor(batch[name]).dependencies:
                if dependency in batch:
                    visit(dependency)
            visiting.pop()

            done.add(name)
            ordered.append(batch[name])

        for name in batch:
            visit(name)

        return ordered
