"""Conformance test scenarios for the circuit breaker middleware.

This package contains end-to-end scenario tests that send requests through
an httpx client protected by CircuitBreakerTransport to a FastAPI upstream.
Each scenario tests a specific aspect of circuit handling.
"""
