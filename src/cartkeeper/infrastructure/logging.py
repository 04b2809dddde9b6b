"""Logging configuration.

stdlib logging carries the records to stderr; structlog shapes them into
key/value events.  Modules only ever call ``structlog.get_logger(__name__)``.
"""

import logging
import sys

import structlog


def configure_logging(level: str = "INFO", json: bool = False) -> None:
    """Configure stdlib logging and structlog.  Safe to call repeatedly."""
    root = logging.getLogger()
    root.setLevel(level)
    root.handlers = []
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    root.addHandler(handler)

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    if json:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def reset_context(**values) -> None:
    """Replace the key/values attached to every event logged from this context."""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(**values)
