"""Custom exceptions for the circuit breaker middleware.

This module defines the exception hierarchy used throughout the middleware
to signal denied requests, fingerprinting failures, and storage failures.

Examples:
    Handling a denied request::

        from circuit_breaker_middleware.exceptions import CircuitOpenError

        try:
            response = await client.get("https://api.example.com/orders")
        except CircuitOpenError as e:
            logger.warning("circuit.open", key=e.key, retries=e.retries)
            if e.response is not None:
                # What the upstream answered the last time it failed
                print(e.response.status_code, e.response.body)

    Handling a fingerprinting error::

        from circuit_breaker_middleware.exceptions import FingerprintError

        try:
            key = compute_fingerprint("POST", uri, body)
        except FingerprintError as e:
            logger.error("fingerprint.failed", error=str(e.cause))
            raise
"""

from typing import Any


class CircuitBreakerError(Exception):
    """Base exception for all circuit breaker errors.

    All exceptions raised by the middleware inherit from this base class,
    allowing callers to catch all middleware-specific errors with a single
    except clause.

    Attributes:
        message: Human-readable error description.
    """

    def __init__(self, message: str) -> None:
        """Initialize the exception with a message.

        Args:
            message: Human-readable error description.
        """
        self.message = message
        super().__init__(message)


class CircuitOpenError(CircuitBreakerError):
    """The circuit for this request is open and the request was not sent.

    Raised by the middleware when a request's fingerprint has failed
    recently and its cooldown window has not yet elapsed. The next handler
    is never invoked for a denied request.

    Attributes:
        message: Human-readable error description.
        request: The request that was denied (an httpx.Request when
            raised through CircuitBreakerTransport).
        response: Synthesized response mirroring the last failing response
            (same status and body, empty headers), or None if the last
            failures were transport-level errors. An httpx.Response when
            raised through CircuitBreakerTransport.
        key: Fingerprint of the denied request.
        retries: Consecutive failures recorded for the fingerprint.
        next_try: Epoch timestamp at which a probing attempt is allowed.

    Examples:
        Raising a circuit open error::

            raise CircuitOpenError(
                message="Circuit Breaker Request Exception",
                request=request,
                response=synthesize_response(state.last_response),
                key=key,
                retries=state.retries,
                next_try=state.next_try,
            )
    """

    def __init__(
        self,
        message: str,
        request: Any,
        response: Any | None = None,
        key: str | None = None,
        retries: int = 0,
        next_try: float | None = None,
    ) -> None:
        """Initialize the circuit open error with details.

        Args:
            message: Human-readable error description.
            request: The request that was denied (an httpx.Request when
            raised through CircuitBreakerTransport).
            response: Synthesized last failing response, if any.
            key: Fingerprint of the denied request.
            retries: Consecutive failures recorded for the fingerprint.
            next_try: Epoch timestamp of the next allowed attempt.
        """
        super().__init__(message)
        self.request = request
        self.response = response
        self.key = key
        self.retries = retries
        self.next_try = next_try


class FingerprintError(CircuitBreakerError):
    """The request could not be turned into a fingerprint.

    Raised when the request components (method, URI, body) cannot be
    serialized, for example a body that is not valid UTF-8 or an object
    that is not JSON serializable. There is no fallback fingerprint.

    Attributes:
        message: Human-readable error description.
        cause: The underlying serialization error.
    """

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        """Initialize the fingerprint error with details.

        Args:
            message: Human-readable error description.
            cause: The underlying serialization error.
        """
        super().__init__(message)
        self.cause = cause


class StorageError(CircuitBreakerError):
    """Storage backend operation failed.

    Storage adapters may wrap backend-specific failures in this exception.
    The middleware never catches it: a failing store fails the request.

    Attributes:
        message: Human-readable error description.
        cause: The underlying exception that caused the storage error.

    Examples:
        Raising a storage error::

            try:
                await redis.get(key)
            except RedisError as e:
                raise StorageError(
                    message=f"Failed to read key from Redis: {e}",
                    cause=e,
                ) from e
    """

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        """Initialize the storage error with details.

        Args:
            message: Human-readable error description.
            cause: The underlying exception that caused the storage error.
        """
        super().__init__(message)
        self.cause = cause
