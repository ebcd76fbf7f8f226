"""structlog configuration shared by the API server and the CLI.

Console output in development, one JSON object per line when
``APP_ENV=production`` (or ``json_output=True``).  Stdlib loggers from
uvicorn, httpx and chromadb are routed through the same processors, and
the chattiest of them are held at WARNING so turn logs stay readable.

Request-scoped fields (``session_id``, ``city``) are bound with
``structlog.contextvars.bound_contextvars`` around a turn and merged into
every event logged inside it, see :func:`turn_context`.
"""

import logging
import os
import sys
from contextlib import AbstractContextManager
from typing import Any, TextIO

import structlog

_NOISY_LOGGERS = ("httpx", "httpcore", "chromadb", "openai", "anthropic", "uvicorn.access")


def configure_logging(
    log_level: str = "INFO",
    json_output: bool = False,
    stream: TextIO | None = None,
) -> structlog.BoundLogger:
    """(Re)configure structlog and the stdlib root logger.

    Args:
        log_level: DEBUG, INFO, WARNING or ERROR.
        json_output: Force the JSON renderer regardless of ``APP_ENV``.
        stream: Where log lines go; stdout when omitted.  The CLI passes
                stderr because its answers are printed on stdout.
    """
    out = stream or sys.stdout
    use_json = json_output or os.environ.get("APP_ENV", "development") == "production"
    level = log_level.upper()

    shared: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    renderer: structlog.types.Processor = (
        structlog.processors.JSONRenderer()
        if use_json
        else structlog.dev.ConsoleRenderer(colors=out.isatty())
    )

    structlog.configure(
        processors=[*shared, renderer],
        wrapper_class=structlog.make_filtering_bound_logger(logging.getLevelName(level)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=out),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(out)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, *shared, renderer],
        )
    )
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    if level != "DEBUG":
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    return structlog.get_logger()


def get_logger(name: str) -> structlog.BoundLogger:
    """Return a logger tagged with *name*, configuring defaults on first use."""
    if not structlog.is_configured():
        configure_logging()
    return structlog.get_logger(logger_name=name)


def turn_context(**fields: Any) -> AbstractContextManager:
    """Bind *fields* to every log event emitted until the block exits."""
    return structlog.contextvars.bound_contextvars(**fields)
