"""Event system: listener registry and emission strategies."""

from plugbus.core.events.bus import Bus
from plugbus.core.events.listeners import Disposer, Listener, ListenerCallback, ListenerRegistry

__all__ = [
    "Bus",
    "Disposer",
    "Listener",
    "ListenerCallback",
    "ListenerRegistry",
]
