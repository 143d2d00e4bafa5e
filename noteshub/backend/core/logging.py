"""
NotesHub logging.

structlog renders both structlog and stdlib records, so SQLAlchemy and
uvicorn output shares the format of our own events. Settings come from
config/settings/logging.yaml; ``run.py`` may override level and format.

Request handlers never pass the request ID themselves: the request
context middleware binds ``request_id``, ``method``, ``path`` and
``source`` into structlog's contextvars for the life of the request.

    logger = get_logger(__name__)
    logger.info("Program created", extra={"program_id": program.id})
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

import structlog
from structlog.typing import Processor

from noteshub.backend.core.config import find_project_root, get_app_config

# Who issued the work being logged: the browser client, run.py, or the app itself.
VALID_SOURCES = frozenset({"web", "cli", "api", "internal", "unknown"})

# Chatty libraries held at WARNING whatever the app level is.
QUIET_LOGGERS = ("uvicorn.access", "sqlalchemy.engine", "aiosqlite")


def _resolve_log_path(configured_path: str) -> Path:
    """Log file paths in logging.yaml are relative to the project root."""
    return find_project_root() / configured_path


def _shared_processors() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        structlog.processors.CallsiteParameterAdder(
            parameters=[
                structlog.processors.CallsiteParameter.FUNC_NAME,
                structlog.processors.CallsiteParameter.LINENO,
            ],
        ),
    ]


def _formatter(renderer: Processor, processors: list[Processor]) -> logging.Formatter:
    return structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=processors)


def setup_logging(
    level: str | None = None,
    format_type: str | None = None,
    enable_console: bool | None = None,
    enable_file_logging: bool | None = None,
) -> None:
    """
    Install NotesHub's handlers on the root logger.

    Any argument left as None falls back to logging.yaml. Calling it again
    replaces the previous handlers, so the app lifespan and run.py can
    both call it.
    """
    config = get_app_config().logging
    level = level or config.level
    format_type = format_type or config.format
    if enable_console is None:
        enable_console = config.handlers.console.enabled
    if enable_file_logging is None:
        enable_file_logging = config.handlers.file.enabled

    processors = _shared_processors()
    structlog.configure(
        processors=processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    json_formatter = _formatter(structlog.processors.JSONRenderer(), processors)

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    if enable_console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(
            _formatter(structlog.dev.ConsoleRenderer(colors=True), processors)
            if format_type == "console"
            else json_formatter
        )
        root_logger.addHandler(console_handler)

    # The file always gets JSON lines, whatever the console format.
    if enable_file_logging:
        file_config = config.handlers.file
        log_path = _resolve_log_path(file_config.path)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            filename=str(log_path),
            maxBytes=file_config.max_bytes,
            backupCount=file_config.backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(json_formatter)
        root_logger.addHandler(file_handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> Any:
    """structlog logger named after the calling module."""
    return structlog.get_logger(name)


def log_with_source(logger: Any, source: str, level: str, message: str, **kwargs: Any) -> None:
    """
    Log outside a request, tagging the event with its source.

    run.py uses it for ``initdb``, where no middleware binds a source:

        log_with_source(logger, "cli", "info", "Tables created")

    Raises:
        AttributeError: If level is not a logger method name
    """
    getattr(logger, level.lower())(message, source=source, **kwargs)
