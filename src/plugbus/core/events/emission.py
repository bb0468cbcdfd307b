"""Emission strategies over a snapshot of listeners.

Every strategy receives listeners already ordered by priority. The two
sequential strategies fold the data through the listeners; the two parallel
strategies hand each listener the same original data and collect results in
listener order.
"""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Sequence
from typing import Any

import structlog

from plugbus.core.errors import DeferredResultError
from plugbus.core.events.listeners import Listener

logger = structlog.get_logger(__name__)


def _log_failure(event: str, listener: Listener, error: Exception) -> None:
    logger.warning(
        "Listener failed",
        event_name=event,
        id=listener.id,
        priority=listener.priority,
        error=str(error),
    )


def _call(event: str, listener: Listener, data: Any) -> Any:
    """Invoke a listener callback, logging and re-raising its failure."""
    try:
        return listener.callback(data)
    except Exception as e:
        _log_failure(event, listener, e)
        raise


async def _resolve(event: str, listener: Listener, result: Any) -> Any:
    """Await a callback result until it is a plain value."""
    try:
        while inspect.isawaitable(result):
            result = await result
    except Exception as e:
        _log_failure(event, listener, e)
        raise
    return result


def _require_immediate(event: str, listener: Listener, result: Any) -> Any:
    """Reject awaitable results in synchronous emissions."""
    if inspect.isawaitable(result):
        if inspect.iscoroutine(result):
            # Never awaited; close it so it does not warn on collection
            result.close()
        raise DeferredResultError(event, listener.id)
    return result


async def emit_async_sequential(event: str, listeners: Sequence[Listener], data: Any) -> Any:
    """
    Pass data through each listener in turn, awaiting every step.

    Args:
        event: Event name, used for error reporting
        listeners: Priority-ordered listener snapshot
        data: Input for the first listener

    Returns:
        The result of the last listener, or ``data`` when there are none
    """
    result = data
    for listener in listeners:
        result = await _resolve(event, listener, _call(event, listener, result))
    return result


def emit_sync(event: str, listeners: Sequence[Listener], data: Any) -> Any:
    """
    Pass data through each listener in turn without suspending.

    Raises:
        DeferredResultError: If a listener returns an awaitable
    """
    result = data
    for listener in listeners:
        result = _require_immediate(event, listener, _call(event, listener, result))
    return result


async def _invoke(event: str, listener: Listener, data: Any) -> Any:
    return await _resolve(event, listener, _call(event, listener, data))


async def emit_async_parallel(event: str, listeners: Sequence[Listener], data: Any) -> list[Any]:
    """
    Run every listener concurrently with the same data.

    Each listener runs as its own task on the current event loop. The
    first failure is raised; results of the other listeners are dropped.

    Returns:
        Results in listener order, regardless of completion order
    """
    if not listeners:
        return []

    results = await asyncio.gather(*(_invoke(event, listener, data) for listener in listeners))
    return list(results)


def emit_sync_parallel(event: str, listeners: Sequence[Listener], data: Any) -> list[Any]:
    """Call every listener eagerly, left to right, with the same data."""
    return [
        _require_immediate(event, listener, _call(event, listener, data))
        for listener in listeners
    ]
