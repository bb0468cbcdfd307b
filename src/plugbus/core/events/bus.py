"""In-process event bus with priority listeners and plugin installation."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from typing import Any

import structlog

from plugbus.core.events import emission
from plugbus.core.events.listeners import (
    Disposer,
    Listener,
    ListenerCallback,
    ListenerRegistry,
)
from plugbus.core.models.config import BusConfig
from plugbus.core.registry.manager import PluginRegistry, discover_plugins
from plugbus.core.registry.plugin import Plugin, PluginDescriptor

logger = structlog.get_logger(__name__)


class Bus:
    """
    Event bus for in-process pub/sub and plugin extension points.

    Listeners are matched by exact event name and run in descending
    priority, registration order breaking ties. Every emission works on a
    snapshot of the matching listeners, so listeners added or removed while
    an emission runs only affect later emissions.

    Usage:
        bus = Bus()
        bus.on("x", lambda d: d + 1, priority=1)
        bus.on("x", lambda d: d * 2)
        bus.emit_sync("x", 3)           # 8
        bus.emit_parallel_sync("x", 3)  # [4, 6]
    """

    def __init__(self, config: BusConfig | None = None) -> None:
        """
        Initialize the bus.

        Args:
            config: Bus configuration; defaults are read from the environment
        """
        self.config = config or BusConfig()
        self._listeners = ListenerRegistry()
        self._plugins = PluginRegistry(self)

        if self.config.plugins.autoload:
            self.install_all(discover_plugins(self.config.plugins.entry_point_group))

    # =========================================================================
    # Listeners
    # =========================================================================

    def on(self, mask: str, callback: ListenerCallback, priority: int = 0) -> Disposer:
        """
        Add a listener.

        Args:
            mask: Event name to listen to
            callback: Called with the event data, returns new data or an awaitable
            priority: Higher priorities run first

        Returns:
            Function removing the listener; returns 1 the first time, then 0
        """
        return self._listeners.register(mask, callback, priority)

    def once(self, mask: str, callback: ListenerCallback, priority: int = 0) -> Disposer:
        """Add a listener that removes itself after its first call."""
        return self._listeners.register_once(mask, callback, priority)

    def listens(
        self,
        mask: str,
        priority: int = 0,
    ) -> Callable[[ListenerCallback], ListenerCallback]:
        """
        Decorator form of :meth:`on`.

        Usage:
            @bus.listens("request", priority=10)
            def authenticate(request):
                ...
        """

        def decorator(callback: ListenerCallback) -> ListenerCallback:
            self.on(mask, callback, priority)
            return callback

        return decorator

    def list(self, event: str, sort: bool = True) -> list[Listener]:
        """Get a snapshot of the listeners for an event."""
        return self._listeners.query(event, sort)

    def has(self, event: str) -> bool:
        """Check whether an event has listeners."""
        return self._listeners.has(event)

    def off(self, event: str) -> int:
        """
        Remove every listener for an event.

        Returns:
            Number of listeners removed
        """
        return self._listeners.remove_matching(event)

    # =========================================================================
    # Emission
    # =========================================================================

    async def emit(self, event: str, data: Any = None) -> Any:
        """
        Pass data through the listeners one by one, awaiting each result.

        Args:
            event: Event name
            data: Input for the first listener

        Returns:
            Result of the last listener, or ``data`` if there are none
        """
        listeners = self.list(event)
        logger.debug(
            "Emitting event", event_name=event, strategy="sequential", listeners=len(listeners)
        )
        return await emission.emit_async_sequential(event, listeners, data)

    def emit_sync(self, event: str, data: Any = None) -> Any:
        """
        Pass data through the listeners one by one, synchronously.

        Raises:
            DeferredResultError: If a listener returns an awaitable
        """
        listeners = self.list(event)
        logger.debug(
            "Emitting event", event_name=event, strategy="sync", listeners=len(listeners)
        )
        return emission.emit_sync(event, listeners, data)

    async def emit_parallel(self, event: str, data: Any = None) -> list[Any]:
        """
        Run every listener concurrently with the same data.

        Returns:
            Listener results in priority order
        """
        listeners = self.list(event)
        logger.debug(
            "Emitting event", event_name=event, strategy="parallel", listeners=len(listeners)
        )
        return await emission.emit_async_parallel(event, listeners, data)

    def emit_parallel_sync(self, event: str, data: Any = None) -> list[Any]:
        """Call every listener with the same data and collect the results."""
        listeners = self.list(event)
        logger.debug(
            "Emitting event", event_name=event, strategy="parallel_sync", listeners=len(listeners)
        )
        return emission.emit_sync_parallel(event, listeners, data)

    # =========================================================================
    # Plugins
    # =========================================================================

    @property
    def plugins(self) -> Mapping[str, PluginDescriptor]:
        """Read-only view of installed plugin descriptors by name."""
        return self._plugins.installed

    def plugin(self, plugin: Plugin, options: Any = None) -> None:
        """
        Install a plugin.

        Raises:
            DuplicatePluginError: If a plugin with the same name is installed
            MissingDependencyError: If a dependency is not installed
            UnmetVersionError: If an installed dependency is too old
        """
        self._plugins.install(plugin, options)

    def install_all(self, plugins: Iterable[Plugin], options: Any = None) -> list[str]:
        """Install a batch of plugins in dependency order."""
        return self._plugins.install_all(plugins, options)

    def add_hooks(self, observer: Any, name: str | None = None) -> None:
        """Register an observer of plugin lifecycle hooks."""
        self._plugins.add_hooks(observer, name)
