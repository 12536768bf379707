"""Logging configuration for the marketplace domain.

Standard library handlers do the writing (console plus two rotating files);
structlog shapes the records. Development gets coloured console output with
rich tracebacks, production and staging get one JSON object per line.
"""

import logging
import logging.handlers
import os
import sys
from pathlib import Path
from typing import Any

import structlog

LEVELS_BY_ENV = {
    "production": "INFO",
    "staging": "INFO",
    "development": "DEBUG",
    "test": "WARNING",
}
JSON_ENVS = ("production", "staging")
QUIET_LOGGERS = ("protean", "urllib3", "asyncio", "sqlalchemy.engine")

MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUPS = 5


def current_env() -> str:
    return (os.getenv("ENV") or os.getenv("ENVIRONMENT") or os.getenv("PROTEAN_ENV") or "development").lower()


def get_log_level() -> str:
    """Get log level based on environment. ``LOG_LEVEL`` overrides it."""
    return os.getenv("LOG_LEVEL", LEVELS_BY_ENV.get(current_env(), "INFO"))


def _rotating_handler(path: Path, level) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        filename=path,
        maxBytes=MAX_LOG_BYTES,
        backupCount=LOG_BACKUPS,
        encoding="utf-8",
    )
    handler.setLevel(level)
    return handler


def setup_stdlib_logging(log_dir: str | os.PathLike = "logs") -> None:
    """Route the root logger to stdout, ``artistry.log`` and ``artistry_error.log``."""
    log_level = get_log_level()

    log_path = Path(log_dir)
    log_path.mkdir(parents=True, exist_ok=True)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers = [
        console_handler,
        _rotating_handler(log_path / "artistry.log", log_level),
        _rotating_handler(log_path / "artistry_error.log", logging.ERROR),
    ]

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def _renderer(json_logs: bool):
    if json_logs:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(
        colors=sys.stdout.isatty(),
        exception_formatter=structlog.dev.RichTracebackFormatter(
            show_locals=False,
            max_frames=2,
        ),
    )


def setup_structlog(json_logs: bool | None = None) -> None:
    """Configure structlog on top of the stdlib handlers."""
    if json_logs is None:
        json_logs = current_env() in JSON_ENVS

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            _renderer(json_logs),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_logging(log_dir: str | os.PathLike = "logs", json_logs: bool | None = None) -> None:
    """Configure all logging for the application."""
    setup_stdlib_logging(log_dir)
    setup_structlog(json_logs)


def bind_profile(owner_id: str | None, **kwargs: Any) -> None:
    """Attach the acting profile to every subsequent log line of this context."""
    structlog.contextvars.bind_contextvars(owner_id=owner_id, **kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()
