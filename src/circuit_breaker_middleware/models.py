"""Core type definitions for the circuit breaker middleware.

This module provides the data structures stored against each request
fingerprint: the retry state and the snapshot of the last failing
response used to answer short-circuited requests.

Examples:
    Recording a first failure::

        import base64
        import time

        from circuit_breaker_middleware.models import RetryState, StoredResponse

        state = RetryState(
            retries=1,
            next_try=time.time() + 300,
            last_response=StoredResponse(
                status_code=500,
                body_b64=base64.b64encode(b"Server Error").decode("ascii"),
            ),
        )

    Round-tripping through a store::

        await storage.set(key, state.to_store(), ttl_seconds=86400)
        restored = RetryState.from_store(await storage.get(key))
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class CircuitState(str, Enum):
    """Represents the circuit state of a single request fingerprint.

    Attributes:
        CLOSED: No failures recorded, requests are sent.
        OPEN_COOLING: Failures recorded and the cooldown has not elapsed,
            requests are denied.
        OPEN_PROBING: Failures recorded and the cooldown has elapsed, the
            next request is sent and its outcome decides the next state.
    """

    CLOSED = "CLOSED"
    OPEN_COOLING = "OPEN_COOLING"
    OPEN_PROBING = "OPEN_PROBING"


class StoredResponse(BaseModel):
    """Snapshot of the most recent failing HTTP response.

    Only the status code and body are kept. Headers are intentionally
    dropped; responses synthesized from a snapshot carry no headers. The
    body is base64-encoded so binary content survives any storage backend
    byte for byte.

    Attributes:
        status_code: HTTP status code of the failing response.
        body_b64: Base64-encoded response body.

    Examples:
        Decoding the response body::

            body_bytes = base64.b64decode(response.body_b64)
    """

    status_code: int = Field(
        ...,
        description="HTTP status code",
        ge=100,
        le=599,
        examples=[429, 500, 503],
    )
    body_b64: str = Field(
        default="",
        description="Base64-encoded response body",
        examples=["eyJlcnJvciI6ICJ1cHN0cmVhbSB1bmF2YWlsYWJsZSJ9"],
    )


class RetryState(BaseModel):
    """Failure bookkeeping for one request fingerprint.

    A default instance (``retries == 0``) represents a healthy request and
    is what a store lookup returns when no entry exists.

    Attributes:
        retries: Consecutive failures observed.
        next_try: Epoch seconds before which requests are denied. Only
            meaningful when ``retries > 0``.
        last_response: Snapshot of the last failing response, or None if
            no failure so far produced an HTTP response.

    Examples:
        >>> RetryState().retries
        0
        >>> RetryState.from_store(None) == RetryState()
        True
    """

    retries: int = Field(
        default=0,
        description="Consecutive failures for this fingerprint",
        ge=0,
    )
    next_try: float = Field(
        default=0.0,
        description="Epoch seconds before which requests are denied",
        ge=0,
    )
    last_response: StoredResponse | None = Field(
        default=None,
        description="Most recent failing response",
    )

    @property
    def is_healthy(self) -> bool:
        """Whether no failures are recorded."""
        return self.retries == 0

    def to_store(self) -> dict[str, Any]:
        """Serialize to the plain mapping written to the store.

        Returns:
            Dictionary with ``retries``, ``next_try`` and ``last_response``.
        """
        return self.model_dump(mode="json")

    @classmethod
    def from_store(cls, value: Any) -> "RetryState":
        """Deserialize a value read from the store.

        Args:
            value: Mapping previously produced by ``to_store()``, or None /
                an empty mapping when the store has no entry.

        Returns:
            The stored retry state, or a healthy default state.

        Raises:
            pydantic.ValidationError: If the stored value is malformed.
        """
        if not value:
            return cls()
        return cls.model_validate(value)
