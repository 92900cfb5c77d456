"""Scenario 3: Cooldown and Probing Conformance Tests

- Requests are denied until next_try, then one probe is sent
- A successful probe deletes the state and closes the circuit
- A failed probe increments retries and doubles the cooldown
- The cooldown schedule follows 5, 10, 20, 40, 80 minutes
"""

import pytest

from circuit_breaker_middleware.config import CircuitBreakerConfig
from circuit_breaker_middleware.exceptions import CircuitOpenError
from circuit_breaker_middleware.fingerprint import compute_fingerprint

BASE_URL = "http://testserver"
X_KEY = compute_fingerprint("GET", f"{BASE_URL}/x", b"")
MINUTE = 60


@pytest.mark.asyncio
async def test_denied_just_before_next_try(make_client, upstream, clock):
    upstream.queue(500)

    async with make_client() as client:
        await client.get("/x")
        clock.advance(5 * MINUTE - 1)

        with pytest.raises(CircuitOpenError):
            await client.get("/x")

    assert upstream.calls_to("/x") == 1


@pytest.mark.asyncio
async def test_probe_allowed_at_next_try(make_client, upstream, storage, clock):
    upstream.queue(500, 200)

    async with make_client() as client:
        await client.get("/x")
        clock.advance(5 * MINUTE)
        response = await client.get("/x")

    assert response.status_code == 200
    assert upstream.calls_to("/x") == 2
    assert await storage.get(X_KEY) is None


@pytest.mark.asyncio
async def test_successful_probe_closes_circuit(make_client, upstream, storage, clock):
    """After a successful probe the next request starts from retries=0."""
    upstream.queue(500, 200, 500)

    async with make_client() as client:
        await client.get("/x")
        clock.advance(5 * MINUTE)
        await client.get("/x")

        # Closed again: sent immediately, and a new failure starts over at 1
        response = await client.get("/x")
        assert response.status_code == 500

    stored = await storage.get(X_KEY)
    assert stored["retries"] == 1
    assert stored["next_try"] == clock() + 5 * MINUTE


@pytest.mark.asyncio
async def test_unauthorized_probe_closes_circuit(make_client, upstream, storage, clock):
    upstream.queue(503, 401, 200)

    async with make_client() as client:
        await client.get("/x")
        clock.advance(5 * MINUTE)
        assert (await client.get("/x")).status_code == 401
        assert (await client.get("/x")).status_code == 200

    assert len(storage) == 0


@pytest.mark.asyncio
async def test_failed_probe_reopens_with_doubled_cooldown(make_client, upstream, storage, clock):
    upstream.queue(500, 500)

    async with make_client() as client:
        await client.get("/x")
        clock.advance(5 * MINUTE)
        assert (await client.get("/x")).status_code == 500

        stored = await storage.get(X_KEY)
        assert stored["retries"] == 2
        assert stored["next_try"] == clock() + 10 * MINUTE

        clock.advance(10 * MINUTE - 1)
        with pytest.raises(CircuitOpenError) as exc_info:
            await client.get("/x")

    assert exc_info.value.retries == 2


@pytest.mark.asyncio
async def test_backoff_schedule(make_client, upstream, storage, clock):
    """Each failed probe doubles the cooldown: 5, 10, 20, 40, 80 minutes."""
    upstream.queue(500, 500, 500, 500, 500)
    cooldowns = []

    async with make_client() as client:
        for _ in range(5):
            await client.get("/x")
            stored = await storage.get(X_KEY)
            cooldown = stored["next_try"] - clock()
            cooldowns.append(cooldown / MINUTE)
            clock.advance(cooldown)

    assert cooldowns == [5, 10, 20, 40, 80]
    assert upstream.calls_to("/x") == 5


@pytest.mark.asyncio
async def test_capped_backoff(make_client, upstream, storage, clock):
    upstream.queue(500, 500, 500, 500)
    config = CircuitBreakerConfig(max_delay_minutes=15)
    cooldowns = []

    async with make_client(config=config) as client:
        for _ in range(4):
            await client.get("/x")
            cooldown = (await storage.get(X_KEY))["next_try"] - clock()
            cooldowns.append(cooldown / MINUTE)
            clock.advance(cooldown)

    assert cooldowns == [5, 10, 15, 15]


@pytest.mark.asyncio
async def test_probe_after_long_idle(make_client, upstream, storage, clock):
    """Probing is allowed regardless of how long ago the circuit opened."""
    upstream.queue(500, 200)

    async with make_client() as client:
        await client.get("/x")
        clock.advance(12 * 60 * MINUTE)
        response = await client.get("/x")

    assert response.status_code == 200
    assert len(storage) == 0
