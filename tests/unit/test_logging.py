"""Tests for structured logging of circuit decisions."""

import pytest
import structlog
from structlog.testing import capture_logs

from circuit_breaker_middleware.core.middleware import CircuitBreakerMiddleware, Request
from circuit_breaker_middleware.core.replay import Response
from circuit_breaker_middleware.exceptions import CircuitOpenError
from circuit_breaker_middleware.observability.logging import configure_logging, get_logger


def respond(status: int):
    async def handler(request, options):
        return Response(status_code=status, body=b"secret body")

    return handler


@pytest.mark.asyncio
async def test_failure_is_logged(storage, clock):
    middleware = CircuitBreakerMiddleware(respond(500), storage, clock=clock)

    with capture_logs() as logs:
        await middleware(Request("GET", "http://example.com/x"))

    events = [entry for entry in logs if entry["event"] == "circuit.failure_recorded"]
    assert len(events) == 1
    assert events[0]["log_level"] == "warning"
    assert events[0]["retries"] == 1
    assert events[0]["status_code"] == 500
    assert events[0]["error"] is None


@pytest.mark.asyncio
async def test_denial_is_logged(storage, clock):
    middleware = CircuitBreakerMiddleware(respond(500), storage, clock=clock)
    await middleware(Request("GET", "http://example.com/x"))

    with capture_logs() as logs:
        with pytest.raises(CircuitOpenError):
            await middleware(Request("GET", "http://example.com/x"))

    assert [entry["event"] for entry in logs] == ["circuit.denied"]
    assert logs[0]["retries"] == 1


@pytest.mark.asyncio
async def test_reset_is_logged(storage, clock):
    middleware = CircuitBreakerMiddleware(respond(200), storage, clock=clock)

    with capture_logs() as logs:
        await middleware(Request("GET", "http://example.com/x"))

    assert [entry["event"] for entry in logs] == ["circuit.reset"]


@pytest.mark.asyncio
async def test_transport_error_is_logged(storage, clock):
    async def broken(request, options):
        raise ConnectionError("refused")

    middleware = CircuitBreakerMiddleware(broken, storage, clock=clock)

    with capture_logs() as logs:
        with pytest.raises(ConnectionError):
            await middleware(Request("GET", "http://example.com/x"))

    assert logs[0]["event"] == "circuit.failure_recorded"
    assert "refused" in logs[0]["error"]
    assert logs[0]["status_code"] is None


@pytest.mark.asyncio
async def test_request_body_is_never_logged(storage, clock):
    middleware = CircuitBreakerMiddleware(respond(500), storage, clock=clock)

    with capture_logs() as logs:
        await middleware(Request("POST", "http://example.com/x", body=b"card=4111"))
        with pytest.raises(CircuitOpenError):
            await middleware(Request("POST", "http://example.com/x", body=b"card=4111"))

    assert all("4111" not in str(entry) for entry in logs)
    assert all("secret body" not in str(entry) for entry in logs)


def test_configure_logging_json():
    try:
        configure_logging(level="INFO", json_output=True)

        processors = structlog.get_config()["processors"]
        assert structlog.is_configured()
        assert isinstance(processors[-1], structlog.processors.JSONRenderer)
    finally:
        structlog.reset_defaults()


def test_configure_logging_console():
    try:
        configure_logging(level="WARNING", json_output=False)

        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)
    finally:
        structlog.reset_defaults()


def test_get_logger_returns_structlog_logger():
    logger = get_logger("circuit_breaker_middleware.test")

    assert hasattr(logger, "warning")
    assert hasattr(logger, "bind")


def test_configure_logging_rejects_unknown_level():
    with pytest.raises(ValueError, match="Unknown log level"):
        configure_logging(level="CHATTY")
