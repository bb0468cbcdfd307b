"""Exception hierarchy for the bus and plugin registry."""

from __future__ import annotations

from collections.abc import Iterable


class PlugbusError(Exception):
    """Base class for all plugbus errors."""

    pass


class InvalidVersionError(PlugbusError, ValueError):
    """Raised when a version string is not dotted-decimal."""

    def __init__(self, version: object) -> None:
        self.version = version
        super().__init__(f"Invalid version {version!r}: expected dotted-decimal like '1.2.3'")


class DeferredResultError(PlugbusError, TypeError):
    """Raised when a listener returns an awaitable to a synchronous emission."""

    def __init__(self, event: str, listener_id: int) -> None:
        self.event = event
        self.listener_id = listener_id
        super().__init__(
            f"Listener {listener_id} for '{event}' returned an awaitable during a synchronous "
            "emission; use emit() or emit_parallel() instead"
        )


class PluginError(PlugbusError):
    """Base class for plugin installation errors."""

    pass


class InvalidPluginError(PluginError):
    """Raised when an object does not carry a plugin descriptor."""

    pass


class DuplicatePluginError(PluginError):
    """Raised when a plugin with the same name is already installed."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Plugin '{name}' is already installed")


class MissingDependencyError(PluginError):
    """Raised when a required plugin is not installed."""

    def __init__(self, plugin: str, dependency: str) -> None:
        self.plugin = plugin
        self.dependency = dependency
        super().__init__(f"Plugin '{dependency}' is required by '{plugin}', but not installed")


class UnmetVersionError(PluginError):
    """Raised when an installed dependency is older than required."""

    def __init__(self, plugin: str, dependency: str, required: str, provided: str) -> None:
        self.plugin = plugin
        self.dependency = dependency
        self.required = required
        self.provided = provided
        super().__init__(
            f"Plugin '{dependency}' version {required} is required by '{plugin}', "
            f"but only {provided} is provided"
        )


class DependencyCycleError(PluginError):
    """Raised when plugins in one batch depend on each other circularly."""

    def __init__(self, names: Iterable[str]) -> None:
        self.names = sorted(names)
        super().__init__(f"Dependency cycle between plugins: {', '.join(self.names)}")
