"""Logging configuration for the application.

Every record carries the originating address and user id of the request
being served (``-`` outside a request), which the request middleware and the
auth dependency publish through context variables.
"""

import logging
import os
import sys
from contextvars import ContextVar
from logging.handlers import RotatingFileHandler
from pathlib import Path

from app.utils.environment import is_debug

client_ip_var: ContextVar[str] = ContextVar("client_ip", default="-")
user_id_var: ContextVar[str] = ContextVar("user_id", default="-")


class RequestContextFilter(logging.Filter):
    """Attach client_ip and user_id from the current request context."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.client_ip = client_ip_var.get()
        record.user_id = user_id_var.get()
        return True


def setup_logger(
    name: str = "business-finder",
    log_file: str | None = None,
    log_level: str | None = None,
) -> logging.Logger:
    """Configure and return the application logger.

    Args:
        name: Logger name
        log_file: Path to log file (default: LOG_FILE env or logs/app.log, empty disables)
        log_level: Log level (default: LOG_LEVEL env, DEBUG locally and INFO when deployed)

    Returns:
        Configured logger instance
    """
    if log_level is None:
        log_level = os.getenv("LOG_LEVEL", "DEBUG" if is_debug() else "INFO")

    level = getattr(logging, log_level.upper(), logging.INFO)

    log = logging.getLogger(name)
    log.setLevel(level)

    # Prevent duplicate handlers
    if log.handlers:
        return log

    log_format = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - [ip=%(client_ip)s user=%(user_id)s] "
        "- %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    context_filter = RequestContextFilter()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(log_format)
    console_handler.addFilter(context_filter)
    log.addHandler(console_handler)

    if log_file is None:
        log_file = os.getenv("LOG_FILE", "logs/app.log")

    if log_file:
        try:
            log_path = Path(log_file)
            log_path.parent.mkdir(parents=True, exist_ok=True)

            # 10MB per file, keep 5 backups
            file_handler = RotatingFileHandler(
                log_file,
                maxBytes=10 * 1024 * 1024,
                backupCount=5,
                encoding="utf-8",
            )
            file_handler.setLevel(level)
            file_handler.setFormatter(log_format)
            file_handler.addFilter(context_filter)
            log.addHandler(file_handler)
        except OSError as e:
            log.warning(f"Failed to create file handler for {log_file}: {e}")

    log.propagate = False

    return log


# Global logger instance
logger = setup_logger()


def get_logger(name: str) -> logging.Logger:
    """Get a child logger that shares the application handlers.

    Args:
        name: Logger name (will be prefixed with 'business-finder.')
    """
    return logger.getChild(name)
