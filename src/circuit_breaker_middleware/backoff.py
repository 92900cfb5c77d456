"""Exponential backoff schedule for open circuits.

The cooldown after the N-th consecutive failure is ``base_delay * 2 ** (N - 1)``
minutes. With the default base delay of 5 minutes this gives::

    retries:  1   2   3   4   5
    minutes:  5  10  20  40  80

No upper bound is applied unless ``max_delay`` is given.
"""

DEFAULT_DELAY_MINUTES = 5


def exponential_delay(
    retries: int,
    base_delay: int = DEFAULT_DELAY_MINUTES,
    max_delay: int | None = None,
) -> int:
    """Return the number of minutes to wait after ``retries`` failures.

    Args:
        retries: Consecutive failure count, must be >= 1.
        base_delay: Delay in minutes after the first failure.
        max_delay: Optional cap in minutes.

    Returns:
        Cooldown duration in minutes.

    Raises:
        ValueError: If retries is less than 1.

    Examples:
        >>> exponential_delay(1)
        5
        >>> exponential_delay(4)
        40
        >>> exponential_delay(10, max_delay=60)
        60
    """
    if retries < 1:
        raise ValueError(f"retries must be >= 1, got {retries}")

    delay = base_delay * 2 ** (retries - 1)
    if max_delay is not None:
        return min(delay, max_delay)
    return delay


def next_retry_timestamp(
    retries: int,
    now: float,
    base_delay: int = DEFAULT_DELAY_MINUTES,
    max_delay: int | None = None,
) -> float:
    """Return the epoch timestamp before which new attempts are denied.

    Args:
        retries: Consecutive failure count including the one just observed.
        now: Current epoch time in seconds.
        base_delay: Delay in minutes after the first failure.
        max_delay: Optional cap in minutes.

    Returns:
        ``now`` plus the cooldown, in epoch seconds.
    """
    return now + exponential_delay(retries, base_delay, max_delay) * 60
