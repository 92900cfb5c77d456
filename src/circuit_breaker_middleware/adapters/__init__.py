"""Client adapters for the circuit breaker middleware.

This package provides adapters that integrate the library-agnostic core
middleware with specific HTTP clients:

- httpx_transport.py: async transport for httpx.AsyncClient

The adapters handle the conversion between library-specific request and
response objects and the middleware's internal representation.
"""

from circuit_breaker_middleware.adapters.httpx_transport import CircuitBreakerTransport

__all__ = ["CircuitBreakerTransport"]
