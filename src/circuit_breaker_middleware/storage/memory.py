"""In-memory storage adapter with per-entry expiry.

This module provides a dictionary-backed implementation of the
StorageAdapter interface. Entries carry an absolute expiry timestamp and
are treated as absent once it has passed.

The MemoryStorageAdapter is suitable for:
    - Single-process applications
    - Development and testing

Shared deployments should back the middleware with a shared cache such as
Redis, so that every process sees the same open circuits.

Examples:
    Basic usage::

        from circuit_breaker_middleware.storage.memory import MemoryStorageAdapter

        adapter = MemoryStorageAdapter()
        await adapter.set("circuit_breaker_middleware_abc", {"retries": 1}, ttl_seconds=86400)
        value = await adapter.get("circuit_breaker_middleware_abc", {})

    Controlling time in tests::

        clock = FakeClock(start=1_700_000_000)
        adapter = MemoryStorageAdapter(clock=clock)
        await adapter.set("key", {"retries": 1}, ttl_seconds=60)
        clock.advance(61)
        assert await adapter.get("key") is None
"""

import copy
import time
from collections.abc import Callable
from typing import Any

from circuit_breaker_middleware.storage.base import StorageAdapter


class MemoryStorageAdapter(StorageAdapter):
    """In-memory storage adapter with TTL expiry.

    Values are deep-copied on the way in and out so callers can never
    mutate stored state through a reference they hold.

    Attributes:
        _store: Dictionary mapping keys to (expires_at, value) tuples.
        _clock: Callable returning the current epoch time in seconds.
    """

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        """Initialize a new in-memory storage adapter.

        Args:
            clock: Source of the current epoch time, time.time by default.
        """
        self._store: dict[str, tuple[float, Any]] = {}
        self._clock = clock

    async def get(self, key: str, default: Any = None) -> Any:
        """Retrieve a value by key.

        Expired entries are removed on read and reported as missing.

        Args:
            key: The key to look up.
            default: Value returned when the key is missing or expired.

        Returns:
            A copy of the stored value, or default.
        """
        entry = self._store.get(key)
        if entry is None:
            return default

        expires_at, value = entry
        if expires_at <= self._clock():
            del self._store[key]
            return default

        return copy.deepcopy(value)

    async def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        """Store a value with a time-to-live.

        Args:
            key: The key.
            value: Value to store.
            ttl_seconds: Seconds until the entry expires.

        Raises:
            ValueError: If ttl_seconds is not positive.
        """
        if ttl_seconds <= 0:
            raise ValueError(f"ttl_seconds must be positive, got {ttl_seconds}")

        self._store[key] = (self._clock() + ttl_seconds, copy.deepcopy(value))

    async def delete(self, key: str) -> None:
        """Remove a key if present.

        Args:
            key: The key to remove.
        """
        self._store.pop(key, None)

    async def cleanup_expired(self) -> int:
        """Remove expired entries from storage.

        Returns:
            The number of entries removed.
        """
        now = self._clock()
        expired_keys = [key for key, (expires_at, _) in self._store.items() if expires_at <= now]

        for key in expired_keys:
            del self._store[key]

        return len(expired_keys)

    def __len__(self) -> int:
        """Number of entries held, including expired ones not yet purged."""
        return len(self._store)
