"""httpx transport adapter for the circuit breaker middleware.

This module provides an httpx async transport that wraps another transport
with the core circuit breaker middleware, making it easy to protect any
httpx.AsyncClient.

The transport:
1. Converts httpx requests to the internal Request format
2. Processes them through the core middleware
3. Returns the inner transport's httpx.Response unchanged

Examples:
    Protecting a client::

        import httpx

        from circuit_breaker_middleware.adapters.httpx_transport import CircuitBreakerTransport
        from circuit_breaker_middleware.storage.memory import MemoryStorageAdapter

        storage = MemoryStorageAdapter()
        client = httpx.AsyncClient(transport=CircuitBreakerTransport(storage=storage))

        try:
            response = await client.get("https://api.example.com/orders")
        except CircuitOpenError as e:
            # Upstream failed recently, request was not sent
            ...

    Wrapping a custom transport::

        transport = CircuitBreakerTransport(
            storage=storage,
            transport=httpx.AsyncHTTPTransport(retries=2),
            config=CircuitBreakerConfig(except_status_codes=[401, 404]),
        )
"""

import time
from collections.abc import Callable
from typing import Any

import httpx

from circuit_breaker_middleware.config import CircuitBreakerConfig
from circuit_breaker_middleware.core.middleware import CircuitBreakerMiddleware, Request
from circuit_breaker_middleware.core.replay import Response
from circuit_breaker_middleware.exceptions import CircuitOpenError
from circuit_breaker_middleware.storage.base import StorageAdapter


class CircuitBreakerTransport(httpx.AsyncBaseTransport):
    """httpx transport with circuit breaker handling.

    Attributes:
        transport: The wrapped transport that performs the actual I/O
        storage: Storage adapter for retry state
        config: Configuration object
        middleware: Core middleware instance
    """

    def __init__(
        self,
        storage: StorageAdapter,
        transport: httpx.AsyncBaseTransport | None = None,
        config: CircuitBreakerConfig | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the transport.

        Args:
            storage: Storage adapter for retry state
            transport: Inner transport (httpx.AsyncHTTPTransport by default)
            config: Configuration object (uses defaults if not provided)
            clock: Source of the current epoch time
        """
        self.transport = transport or httpx.AsyncHTTPTransport()
        self.storage = storage
        self.config = config or CircuitBreakerConfig()
        self.middleware = CircuitBreakerMiddleware(
            self._send,
            storage,
            config=self.config,
            clock=clock,
        )

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        """Send an httpx request through the circuit breaker.

        Args:
            request: The httpx request built by the client

        Returns:
            The inner transport's response

        Raises:
            CircuitOpenError: If the request's circuit is cooling down; it
                carries this httpx request and an httpx.Response rebuilt
                from the last failure
            httpx.TransportError: If the inner transport fails; the failure
                is recorded before the error propagates
        """
        # Streaming bodies must be read before they can be fingerprinted
        body = await request.aread()

        internal_request = Request(
            method=request.method,
            uri=str(request.url),
            body=body,
            headers=dict(request.headers),
        )

        try:
            result = await self.middleware(internal_request, {"httpx_request": request})
        except CircuitOpenError as e:
            raise CircuitOpenError(
                message=e.message,
                request=request,
                response=_to_httpx_response(e.response, request),
                key=e.key,
                retries=e.retries,
                next_try=e.next_try,
            ) from e
        return result.raw

    async def _send(self, _req: Request, options: dict[str, Any]) -> "_HttpxResponse":
        """Next handler: forward the original request to the inner transport."""
        response = await self.transport.handle_async_request(options["httpx_request"])
        await response.aread()
        return _HttpxResponse(response)

    async def aclose(self) -> None:
        await self.transport.aclose()


class _HttpxResponse(Response):
    """Internal Response that keeps a reference to the httpx response."""

    def __init__(self, raw: httpx.Response) -> None:
        super().__init__(
            status_code=raw.status_code,
            headers=dict(raw.headers),
            body=raw.content,
        )
        self.raw = raw


def _to_httpx_response(response: Response | None, request: httpx.Request) -> httpx.Response | None:
    """Convert a synthesized deny-path response into an httpx.Response."""
    if response is None:
        return None
    return httpx.Response(
        status_code=response.status_code,
        headers=response.headers,
        content=response.body,
        request=request,
    )
