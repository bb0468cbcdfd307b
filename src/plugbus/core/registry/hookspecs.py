"""Plugin lifecycle hook specifications using pluggy."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pluggy

if TYPE_CHECKING:
    from plugbus.core.events.bus import Bus
    from plugbus.core.registry.plugin import PluginDescriptor

PROJECT_NAME = "plugbus"

# Plugin markers
hookspec = pluggy.HookspecMarker(PROJECT_NAME)
hookimpl = pluggy.HookimplMarker(PROJECT_NAME)


class PlugbusSpecs:
    """Hooks fired around plugin installation."""

    @hookspec
    def plugbus_plugin_installed(self, bus: Bus, descriptor: PluginDescriptor) -> None:
        """Called after a plugin body ran and its descriptor was recorded."""
        ...

    @hookspec
    def plugbus_plugin_failed(
        self,
        bus: Bus,
        descriptor: PluginDescriptor,
        error: Exception,
    ) -> None:
        """
        Called when a plugin body raised during installation.

        The error is re-raised to the installer after all hooks ran.
        """
        ...
