"""
Centralized logging configuration for the Prompt Lab Engine.
JSON-structured logging for production, readable lines with 'extra' fields appended for development.
"""

import json
import logging
import logging.config
import os
from datetime import datetime
from typing import Optional

__all__ = ("configure_logging", "get_logger")


_STANDARD_ATTRS = frozenset(
    (
        "args",
        "asctime",
        "created",
        "exc_info",
        "exc_text",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "message",
        "module",
        "msecs",
        "msg",
        "name",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "taskName",
        "thread",
        "threadName",
    )
)


class ReadableExtraFormatter(logging.Formatter):
    """
    Formatter that appends 'extra' contextual data to the end of log lines.
    Used in development where JSON lines are hard to scan.
    """

    def format(self, record):
        extras = {k: v for k, v in record.__dict__.items() if k not in _STANDARD_ATTRS}

        line = super().format(record)

        if extras:
            line = f"{line} | {json.dumps(_json_safe(extras), default=str)}"
        return line


def _env() -> str:
    """Detect the current application environment."""
    return (os.getenv("APP_ENV") or os.getenv("ENV") or "development").lower()


def _level() -> str:
    """Detect the default logging level."""
    return (os.getenv("LOG_LEVEL") or "INFO").upper()


def _json_safe(obj):
    if isinstance(obj, datetime):
        return obj.isoformat()
    if isinstance(obj, dict):
        return {k: _json_safe(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_json_safe(v) for v in obj]
    return obj


def build_logging_config(env: str, level: str) -> dict:
    """
    Build the dictConfig mapping for an environment.

    Args:
        env (str): Target environment ('production' enables JSON).
        level (str): Logging level name.

    Returns:
        dict: Configuration accepted by logging.config.dictConfig.
    """
    if env in ("production", "prod"):
        fmt = {
            "()": "pythonjsonlogger.json.JsonFormatter",
            "fmt": "%(asctime)s %(name)s %(levelname)s %(message)s",
        }
        formatter_name = "json"
    else:
        fmt = {
            "()": ReadableExtraFormatter,
            "format": "%(asctime)s %(levelname)s [%(name)s] %(message)s",
            "datefmt": "%Y-%m-%d %H:%M:%S",
        }
        formatter_name = "dev"

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {formatter_name: fmt},
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": formatter_name,
                "stream": "ext://sys.stdout",
                "level": level,
            }
        },
        "root": {"handlers": ["console"], "level": level},
    }


def configure_logging(
    env: Optional[str] = None, level: Optional[str] = None, force: bool = False
) -> None:
    """
    Initialize global logging configuration using dictConfig.

    Args:
        env (str, optional): Target environment ('production' enables JSON).
        level (str, optional): Logging level (DEBUG, INFO, etc.).
        force (bool): If True, reconfigures even if handlers exist.
    """
    env = (env or _env()).lower()
    level = (level or _level()).upper()

    root = logging.getLogger()
    if root.handlers and not force:
        return

    logging.config.dictConfig(build_logging_config(env, level))


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Retrieve a named logger instance, ensuring logging is configured.

    Args:
        name (str, optional): Name for the logger, typically __name__.

    Returns:
        logging.Logger: Configured logger instance.
    """
    if not logging.getLogger().handlers:
        configure_logging()
    return logging.getLogger(name)
