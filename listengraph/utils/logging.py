"""Structured logging setup using structlog.

One processor chain feeds two renderers: a ConsoleRenderer for local
development and a JSONRenderer for production (``APP_ENV=production`` or
``json_output=True``).  The standard-library root logger is routed through
the same chain, so uvicorn's access log and structlog events share a format.

The CLI passes ``stream=sys.stderr`` so that graph output on stdout stays
machine-readable.
"""

import logging
import os
import sys
from typing import TextIO

import structlog

# aiosqlite logs every statement at DEBUG; keep it out of DEBUG runs of
# the graph builder unless explicitly re-enabled.
_NOISY_LOGGERS = ("aiosqlite", "asyncio")

_SHARED_PROCESSORS: list[structlog.types.Processor] = [
    structlog.contextvars.merge_contextvars,
    structlog.processors.add_log_level,
    structlog.processors.StackInfoRenderer(),
    structlog.dev.set_exc_info,
    structlog.processors.TimeStamper(fmt="iso", utc=True),
]


def _renderer(use_json: bool, stream: TextIO) -> structlog.types.Processor:
    if use_json:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=stream.isatty())


def configure_logging(
    log_level: str = "INFO",
    json_output: bool = False,
    stream: TextIO | None = None,
) -> structlog.BoundLogger:
    """Configure structlog and the stdlib root logger.

    Args:
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL.
        json_output: Force JSON lines regardless of ``APP_ENV``.
        stream: Destination for every log line; defaults to stdout.

    Returns:
        A configured structlog BoundLogger.
    """
    level = log_level.upper()
    target = stream or sys.stdout
    use_json = json_output or os.environ.get("APP_ENV", "development") == "production"
    renderer = _renderer(use_json, target)

    structlog.configure(
        processors=[*_SHARED_PROCESSORS, renderer],
        wrapper_class=structlog.make_filtering_bound_logger(logging.getLevelName(level)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=target),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(target)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                *_SHARED_PROCESSORS,
                renderer,
            ],
        )
    )
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(logging.WARNING, root_logger.level))

    return structlog.get_logger()


def get_logger(name: str) -> structlog.BoundLogger:
    """Named structlog logger; configures defaults on first use."""
    if not structlog.is_configured():
        configure_logging()
    return structlog.get_logger(logger_name=name)
