"""Storage adapter protocol for the circuit breaker middleware.

The middleware keeps one small record per request fingerprint in an
external key-value store. This module defines the contract such a store
must satisfy. It is deliberately close to a simple cache interface (the
PSR-16 / Django cache shape): read with a default, write with a TTL, delete.

Values are opaque mappings. The middleware serializes its RetryState to a
plain dict before writing and validates it back after reading, so any
backend able to store JSON-compatible data works.

Examples:
    Implementing a Redis-backed adapter::

        import json

        class RedisStorageAdapter:
            def __init__(self, redis):
                self.redis = redis

            async def get(self, key: str, default: Any = None) -> Any:
                raw = await self.redis.get(key)
                return default if raw is None else json.loads(raw)

            async def set(self, key: str, value: Any, ttl_seconds: int) -> None:
                await self.redis.set(key, json.dumps(value), ex=ttl_seconds)

            async def delete(self, key: str) -> None:
                await self.redis.delete(key)

Atomicity Requirements:
    Adapters MUST make each single-key get/set/delete atomic. No
    cross-call transactions are expected: the middleware performs a plain
    read followed by a write, so two concurrent failures for the same
    fingerprint may both read the same retry count and one increment may
    be lost. This is an accepted limitation of the middleware.

Error Handling:
    Exceptions raised by an adapter propagate to the caller of the
    middleware unchanged. Adapters may wrap backend errors in StorageError.
"""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class StorageAdapter(Protocol):
    """Protocol defining the interface for retry state storage backends.

    All methods are async and must be safe to call concurrently from
    multiple asyncio tasks.
    """

    async def get(self, key: str, default: Any = None) -> Any:
        """Retrieve the value stored under key.

        Args:
            key: The fingerprint key to look up.
            default: Value returned when the key is missing or expired.

        Returns:
            The stored value, or default.
        """
        ...

    async def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        """Store value under key, replacing any existing entry.

        Args:
            key: The fingerprint key.
            value: JSON-compatible mapping to store.
            ttl_seconds: Seconds after which the entry expires.
        """
        ...

    async def delete(self, key: str) -> None:
        """Remove the entry for key. Missing keys are ignored.

        Args:
            key: The fingerprint key.
        """
        ...
