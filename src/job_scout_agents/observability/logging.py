"""Structured logging configuration using structlog."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import structlog
from structlog.contextvars import (
    bind_contextvars,
    clear_contextvars,
    merge_contextvars,
    unbind_contextvars,
)

if TYPE_CHECKING:
    from job_scout_core.config.settings import Settings

# Third-party loggers that chatter at INFO during every page load
_NOISY_LOGGERS = ("asyncio", "playwright", "aiosmtplib", "python_http_client")


def configure_logging(settings: Settings) -> None:
    """Configure structlog with JSON or console rendering.

    Stdlib records (Playwright, aiosmtplib) are routed through the same
    processor chain so every line shares one format.
    """
    shared_processors: list[structlog.types.Processor] = [
        merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if settings.log_format == "json":
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    level = resolve_level(settings.log_level)

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
        foreign_pre_chain=shared_processors,
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    handler = logging.StreamHandler()
    handler.setFormatter(formatter)
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))


def bind_run_context(run_id: str) -> None:
    """Bind run_id to all subsequent log entries via contextvars."""
    bind_contextvars(run_id=run_id)


def bind_listing_context(listing_url: str, position: int) -> None:
    """Bind the listing being processed until ``unbind_listing_context``."""
    bind_contextvars(listing_url=listing_url, listing_position=position)


def unbind_listing_context() -> None:
    """Drop the per-listing keys, keeping the run context."""
    unbind_contextvars("listing_url", "listing_position")


def clear_run_context() -> None:
    """Clear all bound context variables."""
    clear_contextvars()


def resolve_level(level_name: str) -> int:
    """Convert a level name string to a logging level int; INFO when unknown."""
    mapping: dict[str, int] = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR,
        "CRITICAL": logging.CRITICAL,
    }
    return mapping.get(level_name.upper(), logging.INFO)
