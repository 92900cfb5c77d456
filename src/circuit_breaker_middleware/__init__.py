"""
Circuit breaker middleware for Python HTTP clients.

This package stops re-sending requests that keep failing: after a failing
response the identical request is short-circuited for an exponentially
growing cooldown, and the first request after the cooldown decides whether
the circuit closes again.
"""

from circuit_breaker_middleware.config import CircuitBreakerConfig
from circuit_breaker_middleware.core.middleware import CircuitBreakerMiddleware, Request
from circuit_breaker_middleware.core.replay import Response
from circuit_breaker_middleware.exceptions import (
    CircuitBreakerError,
    CircuitOpenError,
    FingerprintError,
    StorageError,
)
from circuit_breaker_middleware.storage.memory import MemoryStorageAdapter

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "CircuitBreakerConfig",
    "CircuitBreakerMiddleware",
    "CircuitBreakerError",
    "CircuitOpenError",
    "FingerprintError",
    "MemoryStorageAdapter",
    "Request",
    "Response",
    "StorageError",
]
