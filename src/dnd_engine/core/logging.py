"""Structured logging for the dnd-engine server.

structlog renders engine events; uvicorn and asyncio keep using the
standard library and are routed to the same stream. The gateway binds
``game_id`` and ``player_id`` per message through contextvars, so engine
modules only log what is specific to them.

Example:
    >>> from dnd_engine.core.logging import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.info("Monster spawned", game_id="g1", monster_type="orc")
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Any

import structlog
from structlog.types import Processor


if TYPE_CHECKING:
    from structlog.types import EventDict, WrappedLogger


STDLIB_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

# stdlib loggers that are too chatty at INFO
QUIET_LOGGERS = ("asyncio", "uvicorn.access", "httpx")


def add_app_context(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    event_dict["app"] = "dnd_engine"
    return event_dict


def _renderer(json_format: bool) -> list[Processor]:
    if json_format:
        return [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    return [
        structlog.dev.ConsoleRenderer(
            colors=sys.stdout.isatty(),
            exception_formatter=structlog.dev.plain_traceback,
        )
    ]


def configure_logging(*, level: str = "INFO", json_format: bool = False) -> None:
    """Configure structlog and the standard library root logger.

    Safe to call more than once; the last call wins. ``create_app`` calls
    it with the values from Settings.

    Args:
        level: DEBUG, INFO, WARNING, ERROR or CRITICAL. Unknown names
            fall back to INFO.
        json_format: Emit one JSON object per line instead of console
            output.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            add_app_context,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.UnicodeDecoder(),
            *_renderer(json_format),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format=STDLIB_FORMAT,
        level=numeric_level,
        stream=sys.stdout,
        force=True,
    )
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """Return a structlog logger, usually ``get_logger(__name__)``."""
    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    """Attach key-value pairs to every log line until ``clear_context``.

    Example:
        >>> bind_context(game_id="g1", player_id="p1", ws_event="action")
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()


__all__ = [
    "configure_logging",
    "get_logger",
    "bind_context",
    "clear_context",
]
