"""
Centralized Logging Configuration.

Every module logs through structlog bound to the stdlib root logger, set up
once by setup_logging(). Defaults come from config/settings/logging.yaml.

Records carry:
    timestamp, level, logger, event   - always
    func_name, lineno                 - call site
    source                            - only when logged via log_with_source()
    extra                             - per-call context, e.g. {"note_id": ...}

Usage:
    from stickynotes.core.logging import get_logger, setup_logging

    setup_logging()                                  # YAML defaults
    setup_logging(level="DEBUG", format_type="console")

    logger = get_logger(__name__)
    logger.info("Note saved", extra={"note_id": note.id})

    log_with_source(logger, "cli", "info", "Backup written", path=str(path))

Console output goes to stderr so command output on stdout stays clean.
The optional JSONL file (logs/system.jsonl by default) rotates by size.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

import structlog
from structlog.typing import Processor

from stickynotes.core.config import find_project_root, get_settings, load_yaml_config
from stickynotes.core.config_schema import FileHandlerSchema, LoggingSchema

VALID_SOURCES = frozenset({"cli"})
"""Known values for the 'source' field. Library modules log without one."""

_logging_config: LoggingSchema | None = None


def _load_logging_config() -> LoggingSchema:
    """
    Read and validate logging.yaml once per process.

    Raises:
        FileNotFoundError: If logging.yaml does not exist
        pydantic.ValidationError: If the file does not match LoggingSchema
    """
    global _logging_config
    if _logging_config is None:
        _logging_config = LoggingSchema(**load_yaml_config("logging.yaml"))
    return _logging_config


def _resolve_log_path(configured_path: str) -> Path:
    path = Path(configured_path)
    return path if path.is_absolute() else find_project_root() / path


def _resolve_level(level: str | None, config: LoggingSchema) -> str:
    """Explicit argument, then STICKYNOTES_LOG_LEVEL, then logging.yaml."""
    return level or get_settings().log_level or config.level


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


def _formatter(renderer: Processor, pre_chain: list[Processor]) -> logging.Formatter:
    return structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=pre_chain)


def _file_handler(config: FileHandlerSchema, formatter: logging.Formatter) -> logging.Handler:
    log_path = _resolve_log_path(config.path)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        filename=str(log_path),
        maxBytes=config.max_bytes,
        backupCount=config.backup_count,
        encoding="utf-8",
    )
    handler.setFormatter(formatter)
    return handler


def setup_logging(
    level: str | None = None,
    format_type: str | None = None,
    enable_console: bool | None = None,
    enable_file_logging: bool | None = None,
) -> None:
    """
    Configure structlog and the root logger's handlers.

    Arguments left as None take their value from logging.yaml. Calling this
    again replaces the previously installed handlers.

    Args:
        level: DEBUG, INFO, WARNING, ERROR or CRITICAL
        format_type: 'console' (human readable) or 'json'
        enable_console: Write records to stderr
        enable_file_logging: Write JSON records to the rotating log file
    """
    config = _load_logging_config()
    log_level = getattr(logging, _resolve_level(level, config).upper())
    output_format = format_type or config.format
    console_on = config.handlers.console.enabled if enable_console is None else enable_console
    file_on = config.handlers.file.enabled if enable_file_logging is None else enable_file_logging

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
    root_logger.setLevel(log_level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    if console_on:
        if output_format == "console":
            console_formatter = _formatter(structlog.dev.ConsoleRenderer(colors=True), processors)
        else:
            console_formatter = json_formatter
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(console_formatter)
        root_logger.addHandler(console_handler)

    if file_on:
        root_logger.addHandler(_file_handler(config.handlers.file, json_formatter))


def get_logger(name: str) -> Any:
    """Return a structlog logger named after the calling module."""
    return structlog.get_logger(name)


def log_with_source(logger: Any, source: str, level: str, message: str, **kwargs: Any) -> None:
    """
    Log with an explicit 'source' field.

    Args:
        logger: Logger from get_logger()
        source: One of VALID_SOURCES
        level: Method name on the logger (debug, info, warning, ...)
        message: Event text
        **kwargs: Extra fields for the record

    Raises:
        AttributeError: If level is not a logger method
    """
    getattr(logger, level.lower())(message, source=source, **kwargs)
