"""
Structured logging utilities using structlog.

The host application normally configures logging once at startup through
``configure_logging``; library modules only ever call ``create_logger``.

Environment Variables:
    LOG_FORMAT: "json" for JSON lines, "console" for human-readable output
    LOG_TO_FILE: Enable rotating file output (default: false)
    LOG_FILE_PATH: Custom log file path (default: ./logs/{app_name}.log)
    LOG_MAX_BYTES: Max bytes per log file before rotation (default: 10MB)
    LOG_BACKUP_COUNT: Number of rotated files to keep (default: 5)
"""

from __future__ import annotations

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

import structlog
from structlog.contextvars import merge_contextvars
from structlog.typing import Processor


def add_app_context(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """
    Add application identity fields to every log line.

    Fields added:
    - service.name: Logical application name (from SERVICE_NAME env var)
    - deployment.environment: Environment (development/staging/production)
    """
    event_dict["service.name"] = os.getenv("SERVICE_NAME", "unknown")
    event_dict["deployment.environment"] = os.getenv("ENVIRONMENT", "development")
    return event_dict


def _shared_processors() -> list[Processor]:
    return [
        merge_contextvars,
        add_app_context,
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


def configure_logging(
    app_name: str,
    environment: str | None = None,
    log_level: str = "INFO",
    log_to_file: bool | None = None,
    log_file_path: str | None = None,
) -> None:
    """
    Configure structlog and the standard library root logger.

    Args:
        app_name: Name reported as service.name
        environment: Environment name (defaults to ENVIRONMENT env var)
        log_level: Logging level (defaults to "INFO")
        log_to_file: Enable file-based logging (defaults to LOG_TO_FILE env var)
        log_file_path: Path to log file (defaults to LOG_FILE_PATH env var)
    """
    if environment is None:
        environment = os.getenv("ENVIRONMENT", "development")

    os.environ.setdefault("SERVICE_NAME", app_name)
    os.environ.setdefault("ENVIRONMENT", environment)

    if log_to_file is None:
        log_to_file = os.getenv("LOG_TO_FILE", "false").lower() in ("true", "1", "yes")

    log_format = os.getenv("LOG_FORMAT", "").lower()
    use_json = log_format == "json" or (not log_format and environment == "production")

    processors = _shared_processors()
    if use_json:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors += [structlog.dev.set_exc_info, structlog.dev.ConsoleRenderer(colors=True)]

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]

    if log_to_file:
        if log_file_path is None:
            log_file_path = os.getenv("LOG_FILE_PATH", f"logs/{app_name}.log")

        log_file = Path(log_file_path)
        log_file.parent.mkdir(parents=True, exist_ok=True)

        handlers.append(
            RotatingFileHandler(
                filename=str(log_file),
                maxBytes=int(os.getenv("LOG_MAX_BYTES", "10485760")),
                backupCount=int(os.getenv("LOG_BACKUP_COUNT", "5")),
                encoding="utf-8",
            )
        )

    logging.basicConfig(
        format="%(message)s",
        handlers=handlers,
        level=getattr(logging, log_level.upper()),
        force=True,
    )

    structlog.configure(
        processors=processors,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def create_logger(name: str | None = None) -> Any:
    """
    Create a structlog logger, optionally bound to a component name.

    Args:
        name: Optional logger name (e.g., "autoconfigure", "jurassic2.api")

    Returns:
        A structlog BoundLogger instance
    """
    logger = structlog.get_logger()

    if name:
        logger = logger.bind(logger_name=name)

    return logger
