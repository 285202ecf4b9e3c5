"""
Dispatch Structured Logging Utilities using Structlog.

This module provides composable logging utilities built on structlog,
designed for Dispatch's HTTP-facing microservices.

Key Features:
- Async-safe request context management with contextvars
- Processor chains for flexible log enrichment
- Environment-based output formatting
- Optional file-based logging with rotation
"""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

import structlog
from structlog.contextvars import bind_contextvars, clear_contextvars, merge_contextvars
from structlog.typing import Processor


def add_service_context(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """
    Add OpenTelemetry service context to all logs.

    Fields added:
    - service.name: Logical service name (from SERVICE_NAME env var)
    - deployment.environment: Environment (development/staging/production)

    Args:
        logger: The logger instance (unused but required by structlog)
        method_name: The logging method name (unused but required by structlog)
        event_dict: The log event dictionary to enrich

    Returns:
        Enriched event dictionary with service context fields
    """
    event_dict["service.name"] = os.getenv("SERVICE_NAME", "unknown")
    event_dict["deployment.environment"] = os.getenv("ENVIRONMENT", "development")
    return event_dict


_TRUTHY = ("true", "1", "yes")
DEFAULT_LOG_MAX_BYTES = 100 * 1024 * 1024
DEFAULT_LOG_BACKUP_COUNT = 10


@dataclass(frozen=True)
class LoggingOptions:
    """Resolved logging options for one service process."""

    service_name: str
    environment: str
    level: int
    json_output: bool
    log_file: Path | None = None
    max_bytes: int = DEFAULT_LOG_MAX_BYTES
    backup_count: int = DEFAULT_LOG_BACKUP_COUNT

    @classmethod
    def resolve(
        cls,
        service_name: str,
        environment: str | None = None,
        log_level: str = "INFO",
        log_to_file: bool | None = None,
        log_file_path: str | None = None,
    ) -> LoggingOptions:
        """Merge explicit arguments with LOG_* environment variables.

        Explicit arguments take precedence. ``LOG_FORMAT`` selects ``json`` or
        ``console``; when unset, production renders JSON.
        """
        environment = environment or os.getenv("ENVIRONMENT", "development")

        if log_to_file is None:
            log_to_file = os.getenv("LOG_TO_FILE", "false").lower() in _TRUTHY

        log_file = None
        if log_to_file:
            log_file = Path(
                log_file_path or os.getenv("LOG_FILE_PATH", f"/app/logs/{service_name}.log")
            )

        log_format = os.getenv("LOG_FORMAT", "").lower()

        return cls(
            service_name=service_name,
            environment=environment,
            level=logging.getLevelNamesMapping()[log_level.upper()],
            json_output=log_format == "json" or (not log_format and environment == "production"),
            log_file=log_file,
            max_bytes=int(os.getenv("LOG_MAX_BYTES", str(DEFAULT_LOG_MAX_BYTES))),
            backup_count=int(os.getenv("LOG_BACKUP_COUNT", str(DEFAULT_LOG_BACKUP_COUNT))),
        )


def build_processors(json_output: bool) -> list[Processor]:
    """Processor chain: request context, service context, timestamp, level, call site, renderer."""
    chain: list[Processor] = [
        merge_contextvars,
        add_service_context,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.add_log_level,
        structlog.processors.CallsiteParameterAdder(
            parameters=[
                structlog.processors.CallsiteParameter.FILENAME,
                structlog.processors.CallsiteParameter.FUNC_NAME,
                structlog.processors.CallsiteParameter.LINENO,
            ],
        ),
    ]
    if json_output:
        chain += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        chain += [structlog.dev.set_exc_info, structlog.dev.ConsoleRenderer(colors=True)]
    return chain


def build_handlers(options: LoggingOptions) -> list[logging.Handler]:
    """Stdout handler, plus a rotating file handler when a log file is set."""
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if options.log_file is not None:
        options.log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            RotatingFileHandler(
                filename=str(options.log_file),
                maxBytes=options.max_bytes,
                backupCount=options.backup_count,
                encoding="utf-8",
            )
        )
    return handlers


def configure_service_logging(
    service_name: str,
    environment: str | None = None,
    log_level: str = "INFO",
    log_to_file: bool | None = None,
    log_file_path: str | None = None,
) -> LoggingOptions:
    """
    Configure stdlib logging and structlog for a Dispatch service.

    Args:
        service_name: Name of the service (e.g., "public_invoice_service")
        environment: Environment name (defaults to ENVIRONMENT env var)
        log_level: Logging level name
        log_to_file: Also write to a rotating file (defaults to LOG_TO_FILE env var)
        log_file_path: Log file location (defaults to LOG_FILE_PATH env var
            or /app/logs/{service_name}.log)

    Environment Variables:
        LOG_FORMAT: "json" or "console"
        LOG_TO_FILE, LOG_FILE_PATH: File output switch and location
        LOG_MAX_BYTES, LOG_BACKUP_COUNT: Rotation size and retained files

    Returns:
        The options that were applied
    """
    options = LoggingOptions.resolve(
        service_name,
        environment=environment,
        log_level=log_level,
        log_to_file=log_to_file,
        log_file_path=log_file_path,
    )

    # Read back by add_service_context on every event
    os.environ.setdefault("SERVICE_NAME", options.service_name)
    os.environ.setdefault("ENVIRONMENT", options.environment)

    logging.basicConfig(
        format="%(message)s",
        handlers=build_handlers(options),
        level=options.level,
        force=True,
    )
    structlog.configure(
        processors=build_processors(options.json_output),
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    return options


def create_service_logger(name: str | None = None) -> Any:
    """
    Create a service logger with optional name binding.

    Args:
        name: Optional logger name (e.g., "api", "data_service_client")

    Returns:
        A configured structlog BoundLogger instance
    """
    logger = structlog.get_logger()

    if name:
        logger = logger.bind(logger_name=name)

    return logger


def bind_request_context(**context: Any) -> None:
    """
    Reset and bind request-scoped logging context.

    Every log line emitted afterwards in the same task carries these fields,
    so handlers do not need to repeat correlation id, client IP or user agent.

    Args:
        **context: Fields to bind (None values are skipped)
    """
    clear_contextvars()
    bind_contextvars(**{key: value for key, value in context.items() if value is not None})
