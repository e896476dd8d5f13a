"""Structured logging for review runs and the signature workflow."""

from __future__ import annotations

import logging

import structlog

LOG_FORMATS = ("json", "console")


def configure_logging(level: str = "INFO", log_format: str = "json") -> None:
    """Configure structlog; events bound with `bound_contextvars` are merged in."""
    if log_format not in LOG_FORMATS:
        raise ValueError(f"Unknown log format: {log_format!r}")
    log_level = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(level=log_level, format="%(message)s")

    renderer = (
        structlog.processors.JSONRenderer()
        if log_format == "json"
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.add_log_level,
            structlog.processors.dict_tracebacks,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        cache_logger_on_first_use=True,
    )
