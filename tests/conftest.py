"""Global test fixtures for plugbus."""

from __future__ import annotations

import os
from typing import Any

import pytest

from plugbus import Bus, BusConfig, create_plugin
from plugbus.core.registry.plugin import Plugin


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep PLUGBUS_* variables from leaking into BusConfig."""
    for key in list(os.environ):
        if key.startswith("PLUGBUS_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def bus() -> Bus:
    """Fresh bus with default configuration."""
    return Bus(BusConfig())


@pytest.fixture
def make_plugin():
    """Factory for plugins that record their installations."""

    def factory(
        name: str,
        version: str = "1.0.0",
        dependencies: dict[str, str] | None = None,
        calls: list[tuple[str, Any]] | None = None,
    ) -> Plugin:
        def body(bus: Bus, options: Any) -> None:
            if calls is not None:
                calls.append((name, options))

        return create_plugin(name, version, dependencies or {}, body)

    return factory
