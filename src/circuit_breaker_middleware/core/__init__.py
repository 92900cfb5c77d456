"""Core middleware logic for the circuit breaker.

This package contains the framework-agnostic business logic:
- State machine: allow/deny decisions and failure bookkeeping
- Replay: response containers and deny-path response synthesis
- Middleware: the interceptor wrapping the next handler

Client adapters wrap the core for specific HTTP libraries.
"""

from circuit_breaker_middleware.core.middleware import CircuitBreakerMiddleware, Request
from circuit_breaker_middleware.core.replay import Response, synthesize_response

__all__ = [
    "CircuitBreakerMiddleware",
    "Request",
    "Response",
    "synthesize_response",
]
