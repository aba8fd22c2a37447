"""Structlog configuration with a stdlib bridge.

Provides:
- configure_logging(): structlog + stdlib setup; later calls re-apply level and renderer
- get_logger(): returns a logger bound to a component name
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

_SHARED_PROCESSORS: list[Any] = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_log_level,
    structlog.processors.TimeStamper(fmt="iso", utc=True),
]

_handler: logging.Handler | None = None


def configure_logging(level: str = "INFO", log_format: str = "console") -> None:
    """Configure structlog and route stdlib logging through the same pipeline.

    structlog itself is configured once. The root handler's renderer and the
    root level follow the most recent call, so each app built with its own
    settings gets the level and format it asked for.
    """
    global _handler  # noqa: PLW0603
    if not structlog.is_configured():
        structlog.configure(
            processors=[
                *_SHARED_PROCESSORS,
                structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
            ],
            wrapper_class=structlog.stdlib.BoundLogger,
            context_class=dict,
            logger_factory=structlog.stdlib.LoggerFactory(),
            cache_logger_on_first_use=True,
        )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=_SHARED_PROCESSORS,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            _select_renderer(log_format),
        ],
    )
    root = logging.getLogger()
    if _handler is None:
        root.handlers.clear()
        _handler = logging.StreamHandler(sys.stdout)
    if _handler not in root.handlers:
        root.addHandler(_handler)
    _handler.setFormatter(formatter)
    root.setLevel(level.upper())


def get_logger(component: str) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger pre-bound with the component name."""
    return structlog.get_logger(component, component=component)


def _select_renderer(log_format: str) -> Any:
    if log_format.lower() == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())
