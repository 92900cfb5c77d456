"""Shared upstream app and client factory for scenario tests."""

import httpx
import pytest
from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse

from circuit_breaker_middleware.adapters.httpx_transport import CircuitBreakerTransport
from circuit_breaker_middleware.config import CircuitBreakerConfig

BASE_URL = "http://testserver"


class Upstream:
    """Scripted upstream: each call pops the next queued status (200 when empty)."""

    def __init__(self) -> None:
        self.statuses: list[int] = []
        self.calls: list[tuple[str, str]] = []

    def queue(self, *statuses: int) -> None:
        self.statuses.extend(statuses)

    def calls_to(self, path: str) -> int:
        return sum(1 for _, called_path in self.calls if called_path == path)


def create_app(upstream: Upstream) -> FastAPI:
    """Create a FastAPI app answering every path with the next queued status."""
    test_app = FastAPI()

    @test_app.api_route("/{path:path}", methods=["GET", "POST", "PUT", "DELETE"])
    async def endpoint(path: str, request: Request) -> PlainTextResponse:
        upstream.calls.append((request.method, "/" + path))
        status = upstream.statuses.pop(0) if upstream.statuses else 200
        return PlainTextResponse(f"upstream answered {status}", status_code=status)

    return test_app


@pytest.fixture
def upstream() -> Upstream:
    return Upstream()


@pytest.fixture
def make_client(upstream, storage, clock):
    """Build an AsyncClient whose transport is wrapped by the circuit breaker."""

    def factory(
        config: CircuitBreakerConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> httpx.AsyncClient:
        inner = transport or httpx.ASGITransport(app=create_app(upstream))
        return httpx.AsyncClient(
            transport=CircuitBreakerTransport(
                storage=storage,
                transport=inner,
                config=config,
                clock=clock,
            ),
            base_url=BASE_URL,
        )

    return factory
