"""Structured logging configuration for taskgpt.

Uses structlog for JSON-formatted, production-ready logging with context management.
"""

import logging

import structlog

from taskgpt.config import Config


def configure_logging(level: str | None = None):
    """Configure structured logging with JSON output for production observability.

    Args:
        level: Log level name; defaults to ``Config.log_level()``

    Returns:
        Configured structlog logger
    """
    numeric_level = logging.getLevelName((level or Config.log_level()).upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer()
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
    return structlog.get_logger("taskgpt")


# Global logger instance
logger = configure_logging()


def get_logger():
    """Get the configured logger instance."""
    return logger
