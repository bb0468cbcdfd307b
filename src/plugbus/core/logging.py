"""Structured logging setup for hosts embedding a bus.

Bus and registry modules log through ``structlog.get_logger(__name__)``
and never configure anything themselves. A host that wants readable or
machine-parsable output calls ``configure_logging`` once at startup.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, TextIO

import structlog

if TYPE_CHECKING:
    from plugbus.core.models.config import BusConfig

# Listener ids, masks and plugin names are the interesting keys; the
# logger name tells emission failures apart from registry messages.
_BASE_PROCESSORS: tuple[structlog.types.Processor, ...] = (
    structlog.stdlib.filter_by_level,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.processors.TimeStamper(fmt="iso", utc=True),
    structlog.processors.format_exc_info,
)


def _renderer(json_output: bool, colors: bool) -> structlog.types.Processor:
    if json_output:
        return structlog.processors.JSONRenderer(sort_keys=True)
    return structlog.dev.ConsoleRenderer(colors=colors)


def configure_logging(
    level: str = "INFO",
    json_output: bool = False,
    colors: bool = True,
    stream: TextIO | None = None,
) -> None:
    """Route plugbus log events through the standard logging module.

    Args:
        level: Threshold name such as ``"DEBUG"`` or ``"WARNING"``
        json_output: Emit one JSON object per line instead of console text
        colors: Colorize console output; ignored for JSON
        stream: Destination, stderr when omitted

    Raises:
        ValueError: If ``level`` is not a known logging level
    """
    numeric_level = logging.getLevelNamesMapping().get(level.upper())
    if numeric_level is None:
        raise ValueError(f"Unknown log level: {level}")

    logging.basicConfig(
        format="%(message)s",
        stream=stream or sys.stderr,
        level=numeric_level,
        force=True,
    )

    structlog.configure(
        processors=[*_BASE_PROCESSORS, _renderer(json_output, colors)],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
    )


def configure_from_config(config: BusConfig) -> None:
    """Apply the ``logging`` section of a bus configuration."""
    settings = config.logging
    configure_logging(
        level=settings.level,
        json_output=settings.json_output,
        colors=settings.colors and not settings.json_output,
    )
