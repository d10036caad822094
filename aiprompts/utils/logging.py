"""Structured logging for the prompt service.

Configuration via environment:
- AIPROMPTS_LOG_LEVEL: debug/info/warning/error (default: info)
- AIPROMPTS_LOG_FORMAT: console/json (default: console)

Modules log through `structlog.get_logger("aiprompts.<module>")`. Request-scoped
fields (request id, mode) are bound with `bind_request_context` and merged into
every event until `clear_request_context` runs.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import TextIO

import structlog


_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}

_configured = False


def configure_logging(
    level: str | None = None,
    format: str | None = None,
    stream: TextIO | None = None,
    force: bool = False,
) -> None:
    global _configured

    if _configured and not force:
        return

    level_name = (level or os.environ.get("AIPROMPTS_LOG_LEVEL", "info")).strip().lower()
    stdlib_level = _LEVELS.get(level_name, logging.INFO)
    fmt = (format or os.environ.get("AIPROMPTS_LOG_FORMAT", "console")).strip().lower()

    logging.basicConfig(
        format="%(message)s",
        stream=stream or sys.stdout,
        level=stdlib_level,
        force=True,
    )

    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if fmt == "json":
        processors = shared_processors + [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = shared_processors + [
            structlog.dev.ConsoleRenderer(colors=False),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    _configured = True


def bind_request_context(**kwargs: object) -> None:
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_request_context() -> None:
    structlog.contextvars.clear_contextvars()
