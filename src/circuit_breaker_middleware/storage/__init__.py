"""Storage adapters for the circuit breaker middleware.

This package provides the storage contract and a reference backend for
persisting per-fingerprint retry state.

Available Adapters:
    - MemoryStorageAdapter: In-memory storage with TTL expiry

RetryStateStore layers typed RetryState access over any adapter.
"""

from circuit_breaker_middleware.storage.base import StorageAdapter
from circuit_breaker_middleware.storage.memory import MemoryStorageAdapter
from circuit_breaker_middleware.storage.retry_state import RetryStateStore

__all__ = [
    "StorageAdapter",
    "MemoryStorageAdapter",
    "RetryStateStore",
]
