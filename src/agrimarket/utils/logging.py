"""Logging for the marketplace.

structlog sits on top of the standard library so uvicorn, protean and
``requests`` output go through the same handlers as our own events.
Request-scoped values (request id, path) are bound with
:func:`add_context` and show up on every line logged while handling
that request.

Environment variables:

* ``LOG_LEVEL`` overrides the per-environment default level.
* ``LOG_DIR`` adds rotating ``agrimarket.log`` and ``agrimarket_error.log``
  files next to the console output.
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

import structlog

DEFAULT_LEVELS = {
    "production": "INFO",
    "development": "DEBUG",
    "test": "WARNING",
}

JSON_ENVIRONMENTS = ("production",)

# Third-party loggers that are chatty at DEBUG
QUIET_LOGGERS = ("urllib3", "asyncio", "multipart", "httpx")


def current_environment() -> str:
    return (os.getenv("PROTEAN_ENV") or "development").lower()


def log_level() -> str:
    default = DEFAULT_LEVELS.get(current_environment(), "INFO")
    return os.getenv("LOG_LEVEL", default).upper()


def _rotating_file(path: Path, level: int | str) -> RotatingFileHandler:
    handler = RotatingFileHandler(path, maxBytes=5 * 1024 * 1024, backupCount=3, encoding="utf-8")
    handler.setLevel(level)
    return handler


def _install_handlers(level: str, log_dir: str | None) -> None:
    root = logging.getLogger()
    root.handlers = [logging.StreamHandler(sys.stdout)]
    root.setLevel(level)

    if log_dir:
        directory = Path(log_dir)
        directory.mkdir(parents=True, exist_ok=True)
        root.addHandler(_rotating_file(directory / "agrimarket.log", level))
        root.addHandler(_rotating_file(directory / "agrimarket_error.log", logging.ERROR))

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def _renderer():
    if current_environment() in JSON_ENVIRONMENTS:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(
        colors=sys.stdout.isatty(),
        exception_formatter=structlog.dev.RichTracebackFormatter(show_locals=False, max_frames=3),
    )


def configure_logging(log_dir: str | None = None) -> None:
    """Wire stdlib handlers and the structlog processor chain."""
    level = log_level()
    _install_handlers(level, log_dir or os.getenv("LOG_DIR"))

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            _renderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def add_context(**values: Any) -> None:
    """Bind values to every log line emitted from the current context."""
    structlog.contextvars.bind_contextvars(**values)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()
