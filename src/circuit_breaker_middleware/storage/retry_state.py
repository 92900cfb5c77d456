"""Typed access to retry state held in a StorageAdapter.

RetryStateStore is the only place where RetryState is converted to and
from the opaque mappings the storage backend holds.
"""

from circuit_breaker_middleware.config import DEFAULT_STATE_TTL_SECONDS
from circuit_breaker_middleware.models import RetryState
from circuit_breaker_middleware.storage.base import StorageAdapter


class RetryStateStore:
    """Load, save and reset RetryState records keyed by fingerprint.

    Every save writes the full TTL again, so a fingerprint that keeps
    failing keeps extending its own expiry.

    Attributes:
        storage: Underlying key-value store
        ttl_seconds: TTL passed on every write
    """

    def __init__(
        self,
        storage: StorageAdapter,
        ttl_seconds: int = DEFAULT_STATE_TTL_SECONDS,
    ) -> None:
        self.storage = storage
        self.ttl_seconds = ttl_seconds

    async def load(self, key: str) -> RetryState:
        """Return the retry state for key, or a healthy state if none is stored."""
        return RetryState.from_store(await self.storage.get(key, {}))

    async def save(self, key: str, state: RetryState) -> None:
        await self.storage.set(key, state.to_store(), self.ttl_seconds)

    async def reset(self, key: str) -> None:
        """Delete the entry so no residual record lingers until TTL expiry."""
        await self.storage.delete(key)
