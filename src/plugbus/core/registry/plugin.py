"""Plugin descriptors and the factory that attaches them."""

from __future__ import annotations

import functools
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from plugbus.core.errors import InvalidPluginError
from plugbus.core.registry.version import validate_version

if TYPE_CHECKING:
    from plugbus.core.events.bus import Bus

# Attribute under which a plugin carries its descriptor
DESCRIPTOR_ATTR = "plugin"

PluginBody = Callable[["Bus", Any], None]


@dataclass(frozen=True)
class PluginDescriptor:
    """Name, version and minimum dependency versions of a plugin."""

    name: str
    version: str
    dependencies: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Validate versions and freeze the dependency mapping."""
        if not isinstance(self.name, str) or not self.name:
            raise InvalidPluginError(f"Plugin name must be a non-empty string, got {self.name!r}")

        validate_version(self.version)

        dependencies = dict(self.dependencies or {})
        for dependency, minimum in dependencies.items():
            if not isinstance(dependency, str) or not dependency:
                raise InvalidPluginError(
                    f"Dependency names of '{self.name}' must be non-empty strings"
                )
            validate_version(minimum)

        object.__setattr__(self, "dependencies", MappingProxyType(dependencies))

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "name": self.name,
            "version": self.version,
            "dependencies": dict(self.dependencies),
        }


@runtime_checkable
class Plugin(Protocol):
    """An installable callable carrying its descriptor."""

    plugin: PluginDescriptor

    def __call__(self, bus: Bus, options: Any) -> None: ...


def create_plugin(
    name: str,
    version: str,
    dependencies: Mapping[str, str] | None,
    body: PluginBody,
) -> Plugin:
    """
    Attach a descriptor to a plugin body.

    Args:
        name: Unique plugin name
        version: Dotted-decimal plugin version
        dependencies: Plugin name to minimum version
        body: Callable run with ``(bus, options)`` on installation

    Returns:
        The body, now carrying the descriptor as its ``plugin`` attribute

    Raises:
        InvalidVersionError: If a version is not dotted-decimal
        InvalidPluginError: If the name is empty
    """
    descriptor = PluginDescriptor(name=name, version=version, dependencies=dependencies or {})

    try:
        setattr(body, DESCRIPTOR_ATTR, descriptor)
        plugin = body
    except AttributeError:
        # Bound methods and builtins reject attributes; wrap them instead
        @functools.wraps(body)
        def plugin(bus: Bus, options: Any) -> None:
            body(bus, options)

        setattr(plugin, DESCRIPTOR_ATTR, descriptor)

    return plugin  # type: ignore[return-value]


def plugin_factory(
    name: str,
    version: str,
    dependencies: Mapping[str, str] | None = None,
) -> Callable[[PluginBody], Plugin]:
    """
    Decorator form of :func:`create_plugin`.

    Usage:
        @plugin_factory("auth", "1.2.0", {"core": "1.0"})
        def auth(bus, options):
            bus.on("request", check_token)
    """

    def decorator(body: PluginBody) -> Plugin:
        return create_plugin(name, version, dependencies, body)

    return decorator


def get_descriptor(plugin: Any) -> PluginDescriptor:
    """Get the descriptor attached to a plugin."""
    descriptor = getattr(plugin, DESCRIPTOR_ATTR, None)
    if not isinstance(descriptor, PluginDescriptor) or not callable(plugin):
        raise InvalidPluginError(f"{plugin!r} is not a plugin; build it with create_plugin()")
    return descriptor
