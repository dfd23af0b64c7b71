"""Structured logging setup shared by the CLI and embedding applications."""

import logging
import sys

import structlog


def configure_logging(level: str = "info", debug: bool = False) -> None:
    """Configure structlog to write to stderr, keeping stdout free for results.

    Rendered lines go through the standard library root handler, which owns
    the stream. A stream closed later makes logging report an error instead of
    raising inside validation.

    Args:
        level: Minimum level name ("debug", "info", "warning", ...)
        debug: Human-readable console output instead of JSON lines
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    logging.basicConfig(
        level=numeric_level,
        format="%(message)s",
        stream=sys.stderr,
        force=True,
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer() if debug else structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )
