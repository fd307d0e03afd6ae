"""Structured logging for the Kubernetes auth validator.

Log events go to stderr by default so that stdout carries only the report,
which keeps `--output json` parseable. Access tokens and reviewer JWTs are
never passed as log fields.
"""

import logging
import sys
from typing import Any

import structlog


def setup_logging(level: str = "INFO", format: str = "console", output: str = "stderr") -> None:
    """Configure structlog and the stdlib loggers used by kubernetes and httpx.

    Called once by the CLI after the configuration file is loaded; `--verbose`
    passes DEBUG to surface per-gateway fetch and TokenReview events.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format: "console" for human-readable lines, "json" for log shippers
        output: "stderr" (default) or "stdout"
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    stream = sys.stdout if output == "stdout" else sys.stderr

    # Configure standard logging (kubernetes and httpx log through it)
    logging.basicConfig(
        format="%(message)s",
        stream=stream,
        level=log_level,
    )

    # Configure processors based on format
    if format == "json":
        processors = [
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = [
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """Get a structured logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Structured logger instance
    """
    return structlog.get_logger(name)


def log_error(
    logger: structlog.BoundLogger,
    error: Exception,
    operation: str | None = None,
    **kwargs: Any,
) -> None:
    """Log a failure as a structured `error_occurred` event.

    The CLI uses this for precondition failures before exiting non-zero.

    Args:
        logger: Logger instance
        error: Exception instance
        operation: Operation name (optional)
        **kwargs: Additional context fields
    """
    context = {
        "error_type": type(error).__name__,
        "error_message": str(error),
        **kwargs,
    }

    if operation:
        context["operation"] = operation

    logger.error("error_occurred", **context)
