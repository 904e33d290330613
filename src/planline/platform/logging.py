"""
Planline Structured Logging

Configures structured JSON logging using structlog. Hosts call
configure_logging() once at startup; engine modules only call get_logger().

Per-computation context (the project being estimated) is bound with
structlog.contextvars by the orchestrator and merged into every entry.
"""

import logging
import sys

import structlog

from planline.platform.config import settings


def add_app_context(logger, method_name: str, event_dict: dict) -> dict:
    """Stamp every entry with the application name and environment."""
    event_dict.setdefault("app", settings.APP_NAME)
    event_dict.setdefault("env", settings.APP_ENV)
    return event_dict


def configure_logging() -> None:
    """Configure structured logging for the application."""

    log_level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    structlog.configure(
        processors=[
            # project_id and other bound context
            structlog.contextvars.merge_contextvars,
            add_app_context,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            # JSON in production, console in development
            structlog.processors.JSONRenderer()
            if settings.APP_ENV == "production"
            else structlog.dev.ConsoleRenderer(colors=True),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=log_level,
    )


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)
