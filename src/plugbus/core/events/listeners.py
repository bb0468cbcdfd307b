"""Listener storage with priority-ordered lookup."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

import structlog

logger = structlog.get_logger(__name__)

# A callback receives the event data and returns new data, directly or as an awaitable
ListenerCallback = Callable[[Any], Any | Awaitable[Any]]

# Calling a disposer removes its listener and returns how many were removed
Disposer = Callable[[], int]


@dataclass(frozen=True)
class Listener:
    """A callback registered against an event mask."""

    id: int
    mask: str
    callback: ListenerCallback
    priority: int = 0


class ListenerRegistry:
    """Insertion-ordered collection of listeners owned by one bus."""

    def __init__(self) -> None:
        """Initialize an empty registry."""
        self._listeners: list[Listener] = []
        self._next_id = 0

    def __len__(self) -> int:
        return len(self._listeners)

    def register(
        self,
        mask: str,
        callback: ListenerCallback,
        priority: int = 0,
    ) -> Disposer:
        """
        Add a listener.

        Args:
            mask: Event name the listener reacts to
            callback: Function called with the event data
            priority: Higher priorities run first

        Returns:
            Disposer that removes this listener
        """
        listener_id = self._next_id
        self._next_id += 1

        self._listeners.append(
            Listener(id=listener_id, mask=mask, callback=callback, priority=priority)
        )
        logger.debug("Listener registered", mask=mask, id=listener_id, priority=priority)

        def dispose() -> int:
            old_length = len(self._listeners)
            self._listeners = [
                listener for listener in self._listeners if listener.id != listener_id
            ]
            removed = old_length - len(self._listeners)
            if removed:
                logger.debug("Listener disposed", mask=mask, id=listener_id)
            return removed

        return dispose

    def register_once(
        self,
        mask: str,
        callback: ListenerCallback,
        priority: int = 0,
    ) -> Disposer:
        """
        Add a listener that removes itself after its first call.

        Once fired, any later invocation of the wrapper passes the data
        through unchanged instead of calling ``callback`` again.
        """
        fired = False

        def wrapper(data: Any) -> Any:
            nonlocal fired
            if fired:
                return data
            # Claimed before the call so a nested emit cannot re-enter
            fired = True
            try:
                result = callback(data)
            except Exception:
                fired = False
                raise
            dispose()
            return result

        dispose = self.register(mask, wrapper, priority)
        return dispose

    def query(self, mask: str, sort: bool = True) -> list[Listener]:
        """
        Get the listeners registered for an event.

        Args:
            mask: Event name, matched by exact equality
            sort: Order by descending priority, keeping registration order on ties

        Returns:
            A new list, unaffected by later registrations or removals
        """
        matching = [listener for listener in self._listeners if listener.mask == mask]
        if sort:
            # list.sort is stable, so equal priorities keep registration order
            matching.sort(key=lambda listener: listener.priority, reverse=True)
        return matching

    def has(self, mask: str) -> bool:
        """Check whether any listener is registered for an event."""
        return any(listener.mask == mask for listener in self._listeners)

    def remove_matching(self, mask: str) -> int:
        """
        Remove every listener registered for an event.

        Returns:
            Number of listeners removed
        """
        old_length = len(self._listeners)
        self._listeners = [listener for listener in self._listeners if listener.mask != mask]
        removed = old_length - len(self._listeners)
        logger.debug("Listeners removed", mask=mask, count=removed)
        return removed
