"""Structured logging configuration with structlog."""

from __future__ import annotations

import logging

import structlog

from .config import LOG_FORMAT, LOG_LEVEL


def setup_logging(log_level: str = LOG_LEVEL, log_format: str = LOG_FORMAT) -> None:
    """Configure structlog for JSON or console output."""

    renderer: structlog.types.Processor = (
        structlog.processors.JSONRenderer()
        if log_format == "json"
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(level=getattr(logging, log_level.upper(), logging.INFO))


__all__ = ["setup_logging"]
