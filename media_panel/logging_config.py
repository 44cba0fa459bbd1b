"""Structured logging configuration for Media Panel.

JSON structured logs go to logs/panel.log (10MB rotation, 5 backups) and a
human-readable copy goes to the console.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

from pythonjsonlogger import jsonlogger

DEFAULT_LOG_DIR = Path(__file__).parent.parent / "logs"


def setup_logging(log_level: str = "INFO", log_dir: Path | None = None) -> logging.Logger:
    """Configure structured logging with JSON file output and console output.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_dir: Directory for the rotating JSON log (defaults to ./logs)

    Returns:
        Configured root logger instance
    """
    log_dir = log_dir or DEFAULT_LOG_DIR
    log_dir.mkdir(parents=True, exist_ok=True)
    level = getattr(logging, log_level.upper())

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    json_handler = RotatingFileHandler(
        log_dir / "panel.log",
        maxBytes=10 * 1024 * 1024,
        backupCount=5,
        encoding="utf-8",
    )
    json_handler.setFormatter(
        jsonlogger.JsonFormatter(
            "%(asctime)s %(name)s %(levelname)s %(message)s %(filename)s %(lineno)d",
            timestamp=True,
        )
    )
    # File keeps everything, the console honours log_level
    json_handler.setLevel(logging.DEBUG)
    root_logger.addHandler(json_handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(
        logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    console_handler.setLevel(level)
    root_logger.addHandler(console_handler)

    # The poll loop issues several requests per tick; keep httpx quiet
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

    return root_logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance with structured logging support."""
    return logging.getLogger(name)


def log_with_context(
    logger: logging.Logger,
    level: str,
    message: str,
    **extra_fields: Any,
) -> None:
    """Log a message with additional structured context fields.

    Args:
        logger: Logger instance
        level: Log level (debug, info, warning, error, critical)
        message: Log message
        **extra_fields: Fields merged into the JSON record (event_type, command, ...)
    """
    log_method = getattr(logger, level.lower())
    log_method(message, extra=extra_fields)
