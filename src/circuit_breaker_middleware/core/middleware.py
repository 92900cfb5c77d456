"""Framework-agnostic circuit breaker middleware.

This module provides the interceptor that sits in front of the next
handler of an HTTP client pipeline. For every outgoing request it:

1. Computes the request fingerprint
2. Loads the fingerprint's retry state from the store
3. Denies the request with CircuitOpenError while the circuit cools down
4. Otherwise forwards it and records the outcome

The downstream response or exception is handed back to the caller
unchanged; the bookkeeping is a side effect only.

Examples:
    Wrapping a handler directly::

        from circuit_breaker_middleware.core.middleware import CircuitBreakerMiddleware
        from circuit_breaker_middleware.storage.memory import MemoryStorageAdapter

        async def send(request, options):
            ...  # issue the HTTP call
            return Response(status_code=200, body=b"ok")

        middleware = CircuitBreakerMiddleware(send, MemoryStorageAdapter())
        response = await middleware(Request("GET", "https://api.example.com/x"))

    Building a handler chain with the factory::

        wrap = CircuitBreakerMiddleware.factory(storage)
        handler = wrap(send)
        response = await handler(request, {"timeout": 5})
"""

import time
from collections.abc import Awaitable, Callable
from typing import Any

from circuit_breaker_middleware.config import CircuitBreakerConfig
from circuit_breaker_middleware.core.replay import Response, snapshot_response, synthesize_response
from circuit_breaker_middleware.core.state_machine import (
    is_allowed,
    is_failure_status,
    register_failure,
)
from circuit_breaker_middleware.exceptions import CircuitOpenError
from circuit_breaker_middleware.fingerprint import compute_fingerprint
from circuit_breaker_middleware.models import RetryState, StoredResponse
from circuit_breaker_middleware.observability.logging import get_logger
from circuit_breaker_middleware.storage.base import StorageAdapter
from circuit_breaker_middleware.storage.retry_state import RetryStateStore

logger = get_logger(__name__)

Handler = Callable[["Request", dict[str, Any]], Awaitable[Response]]


class Request:
    """Abstract outgoing request representation.

    This is a simple container for the request data the middleware needs.
    Client adapters convert their library-specific request objects into
    this format.

    Attributes:
        method: HTTP method (GET, POST, etc.)
        uri: Full URI including the query string
        body: Request body as bytes
        headers: Request headers as dict
    """

    def __init__(
        self,
        method: str,
        uri: str,
        body: bytes = b"",
        headers: dict[str, str] | None = None,
    ) -> None:
        self.method = method
        self.uri = uri
        self.body = body
        self.headers = headers if headers is not None else {}

    def __repr__(self) -> str:
        return f"<Request [{self.method} {self.uri}]>"


class CircuitBreakerMiddleware:
    """Middleware that stops sending requests that keep failing.

    Attributes:
        next_handler: Handler invoked for allowed requests
        storage: Storage adapter holding retry state
        config: Configuration object
        retry_states: Typed view of the storage
    """

    def __init__(
        self,
        next_handler: Handler,
        storage: StorageAdapter,
        config: CircuitBreakerConfig | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the middleware.

        Args:
            next_handler: Next handler in the chain
            storage: Storage adapter for retry state
            config: Configuration object (defaults if not provided)
            clock: Source of the current epoch time
        """
        self.next_handler = next_handler
        self.storage = storage
        self.config = config or CircuitBreakerConfig()
        self.retry_states = RetryStateStore(storage, self.config.state_ttl_seconds)
        self._clock = clock

    @classmethod
    def factory(
        cls,
        storage: StorageAdapter,
        config: CircuitBreakerConfig | None = None,
        clock: Callable[[], float] = time.time,
    ) -> Callable[[Handler], "CircuitBreakerMiddleware"]:
        """Return a callable that wraps a handler in this middleware.

        Every wrapper produced shares the same storage, so circuits opened
        through one handler are seen by all of them.

        Args:
            storage: Storage adapter for retry state
            config: Configuration object
            clock: Source of the current epoch time

        Returns:
            Callable taking the next handler and returning the middleware
        """

        def wrap(next_handler: Handler) -> "CircuitBreakerMiddleware":
            return cls(next_handler, storage, config=config, clock=clock)

        return wrap

    async def __call__(
        self,
        request: Request,
        options: dict[str, Any] | None = None,
    ) -> Response:
        """Send a request through the circuit breaker.

        Args:
            request: The outgoing request
            options: Options forwarded untouched to the next handler

        Returns:
            Whatever the next handler returned

        Raises:
            CircuitOpenError: If the request's circuit is cooling down
            FingerprintError: If the request cannot be fingerprinted
            Exception: Any exception raised by the next handler or the
                storage adapter, unchanged
        """
        options = options if options is not None else {}

        key = self._key(request)
        state = await self.retry_states.load(key)

        if not is_allowed(state, self._clock()):
            self._deny(request, key, state)

        try:
            response = await self.next_handler(request, options)
        except Exception as e:
            await self._on_rejected(key, e)
            raise

        await self._on_fulfilled(key, response)
        return response

    def _key(self, request: Request) -> str:
        return compute_fingerprint(
            method=request.method,
            uri=request.uri,
            body=request.body,
            prefix=self.config.key_prefix,
        )

    def _deny(self, request: Request, key: str, state: RetryState) -> None:
        """Raise CircuitOpenError for a request whose circuit is cooling down."""
        logger.warning(
            "circuit.denied",
            key=key,
            method=request.method,
            retries=state.retries,
            next_try=state.next_try,
        )
        raise CircuitOpenError(
            message="Circuit Breaker Request Exception",
            request=request,
            response=synthesize_response(state.last_response),
            key=key,
            retries=state.retries,
            next_try=state.next_try,
        )

    async def _on_fulfilled(self, key: str, response: Response) -> None:
        """Record the outcome of an attempt that produced a response."""
        if is_failure_status(response.status_code, self.config.except_status_codes):
            await self._record_failure(key, snapshot=snapshot_response(response))
        else:
            await self.retry_states.reset(key)
            logger.debug("circuit.reset", key=key, status_code=response.status_code)

    async def _on_rejected(self, key: str, error: Exception) -> None:
        """Record an attempt that failed without producing a response."""
        await self._record_failure(key, error=error)

    async def _record_failure(
        self,
        key: str,
        snapshot: StoredResponse | None = None,
        error: Exception | None = None,
    ) -> None:
        # Re-read so the increment starts from the latest stored count
        state = await self.retry_states.load(key)
        new_state = register_failure(state, self._clock(), self.config, response=snapshot)
        await self.retry_states.save(key, new_state)

        logger.warning(
            "circuit.failure_recorded",
            key=key,
            retries=new_state.retries,
            next_try=new_state.next_try,
            status_code=snapshot.status_code if snapshot is not None else None,
            error=repr(error) if error is not None else None,
        )
