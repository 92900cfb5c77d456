"""Circuit decision engine.

This module decides whether a request may be sent, classifies the outcome
of an attempt, and computes the retry state that follows a failure. It is
pure: nothing here touches the store or the clock, callers pass ``now``.

Each fingerprint moves between three states::

    CLOSED --failure--> OPEN_COOLING --cooldown elapsed--> OPEN_PROBING
    OPEN_PROBING --failure--> OPEN_COOLING (retries + 1)
    OPEN_PROBING --success or ignored status--> CLOSED (state deleted)

OPEN_COOLING -> OPEN_PROBING is never written to the store; it is the
read-time comparison ``now >= next_try``.

Examples:
    Deciding on a request::

        from circuit_breaker_middleware.core.state_machine import is_allowed

        state = await retry_states.load(key)
        if not is_allowed(state, time.time()):
            raise CircuitOpenError(...)

    Recording a failure::

        new_state = register_failure(state, time.time(), config, response=snapshot)
        await retry_states.save(key, new_state)
"""

from collections.abc import Collection

from circuit_breaker_middleware.backoff import next_retry_timestamp
from circuit_breaker_middleware.config import CircuitBreakerConfig
from circuit_breaker_middleware.models import CircuitState, RetryState, StoredResponse


def evaluate(state: RetryState, now: float) -> CircuitState:
    """Return the circuit state of a fingerprint at time ``now``.

    Args:
        state: Stored retry state (healthy default if nothing is stored)
        now: Current epoch time in seconds

    Returns:
        CLOSED, OPEN_COOLING or OPEN_PROBING
    """
    if state.retries == 0:
        return CircuitState.CLOSED

    if now >= state.next_try:
        return CircuitState.OPEN_PROBING

    return CircuitState.OPEN_COOLING


def is_allowed(state: RetryState, now: float) -> bool:
    """Whether a request with this retry state may be sent at ``now``."""
    return evaluate(state, now) is not CircuitState.OPEN_COOLING


def is_failure_status(status_code: int, except_codes: Collection[int]) -> bool:
    """Classify an HTTP status code.

    Any status >= 400 trips the circuit unless it is in ``except_codes``.
    Everything else, including an excepted error code, resets it.

    Args:
        status_code: Status of the completed attempt
        except_codes: Error codes that do not count as failures

    Returns:
        True if the response counts as a failure

    Examples:
        >>> is_failure_status(500, {401})
        True
        >>> is_failure_status(401, {401})
        False
        >>> is_failure_status(302, {401})
        False
    """
    return status_code >= 400 and status_code not in except_codes


def register_failure(
    state: RetryState,
    now: float,
    config: CircuitBreakerConfig,
    response: StoredResponse | None = None,
) -> RetryState:
    """Compute the retry state following a failed attempt.

    The retry count is incremented and ``next_try`` is pushed out by the
    backoff delay for the new count. A failing HTTP response replaces the
    stored snapshot; a transport-level failure (``response`` is None) keeps
    whatever snapshot was recorded before.

    Args:
        state: Retry state read before the attempt
        now: Current epoch time in seconds
        config: Backoff settings
        response: Snapshot of the failing response, None for transport errors

    Returns:
        New RetryState to be written back to the store
    """
    retries = state.retries + 1
    return RetryState(
        retries=retries,
        next_try=next_retry_timestamp(
            retries,
            now,
            base_delay=config.base_delay_minutes,
            max_delay=config.max_delay_minutes,
        ),
        last_response=response if response is not None else state.last_response,
    )
