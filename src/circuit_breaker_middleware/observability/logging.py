"""Structured logging configuration for the circuit breaker middleware.

This module provides structured logging using structlog to emit
JSON-formatted logs with contextual information. The middleware binds:
- Fingerprint keys
- Retry counts and next attempt timestamps
- Status codes or transport errors of failed attempts

Request bodies are never logged.

Examples:
    Configure logging::

        from circuit_breaker_middleware.observability.logging import configure_logging

        configure_logging(level="INFO", json_output=True)

    Output (JSON) when a circuit opens::

        {
            "event": "circuit.failure_recorded",
            "key": "circuit_breaker_middleware_5d41402abc4b2a76b9719d911017c592",
            "retries": 1,
            "next_try": 1700000300.0,
            "status_code": 503,
            "error": null,
            "timestamp": "2024-01-01T00:00:00.000000Z",
            "level": "warning"
        }
"""

import logging
import sys
from typing import Any

import structlog


def configure_logging(
    level: str = "INFO",
    json_output: bool = True,
) -> None:
    """Configure structlog output for circuit decisions.

    Call once at application startup. ``circuit.denied`` and
    ``circuit.failure_recorded`` are emitted at WARNING and ``circuit.reset``
    at DEBUG, so ``level="WARNING"`` keeps only the events that mean an
    upstream is unhealthy.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_output: If True, emit JSON logs; if False, use console format

    Raises:
        ValueError: If the level name is unknown
    """
    log_level = logging.getLevelNamesMapping().get(level.upper())
    if log_level is None:
        raise ValueError(f"Unknown log level: {level}")

    processors: list[object] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]

    if json_output:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()))

    structlog.configure(
        processors=processors,  # type: ignore[arg-type]
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> Any:
    """Get a structlog logger for a module of this package."""
    return structlog.get_logger(name)
