"""Observability utilities for the circuit breaker middleware.

Structured logging with contextual information about circuit decisions.
"""

from circuit_breaker_middleware.observability.logging import configure_logging, get_logger

__all__ = [
    "configure_logging",
    "get_logger",
]
