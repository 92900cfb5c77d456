"""Configuration module for the circuit breaker middleware.

This module provides the CircuitBreakerConfig class for configuring which
responses trip the circuit, how long circuits stay open, and how retry state
is stored.

Example:
    Basic usage with defaults:

        >>> config = CircuitBreakerConfig()
        >>> config.except_status_codes
        [401]
        >>> config.base_delay_minutes
        5

    Custom configuration:

        >>> config = CircuitBreakerConfig(
        ...     except_status_codes=[401, 404],
        ...     base_delay_minutes=1,
        ...     max_delay_minutes=60,
        ... )

    Loading from environment:

        >>> import os
        >>> os.environ['CIRCUIT_BREAKER_EXCEPT_STATUS_CODES'] = '401,403'
        >>> os.environ['CIRCUIT_BREAKER_MAX_DELAY_MINUTES'] = '120'
        >>> config = CircuitBreakerConfig.from_env()
"""

import os
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

from circuit_breaker_middleware.backoff import DEFAULT_DELAY_MINUTES
from circuit_breaker_middleware.fingerprint import KEY_PREFIX

# One day
DEFAULT_STATE_TTL_SECONDS = 86400


class CircuitBreakerConfig(BaseModel):
    """Configuration for the circuit breaker middleware.

    Attributes:
        except_status_codes: Status codes >= 400 that do not count as
            failures. Responses with these codes reset the circuit like a
            success. Default is [401].
        base_delay_minutes: Cooldown in minutes after the first failure.
            Each further failure doubles it. Default is 5.
        max_delay_minutes: Upper bound for the cooldown in minutes. None
            (the default) leaves the growth unbounded.
        state_ttl_seconds: Lifetime of a stored retry state entry, refreshed
            on every failure. Must be between 1 and 604800 (7 days).
            Default is 86400 (1 day).
        key_prefix: Namespace prepended to fingerprints so they do not
            collide with other keys in a shared store.

    Note:
        This class is immutable (frozen=True). Create a new instance if you
        need different settings.
    """

    except_status_codes: list[int] | str = Field(
        default=[401],
        description="Status codes >= 400 that do not trip the circuit",
    )
    base_delay_minutes: int = Field(
        default=DEFAULT_DELAY_MINUTES,
        description="Cooldown in minutes after the first failure",
    )
    max_delay_minutes: int | None = Field(
        default=None,
        description="Optional cap on the cooldown in minutes",
    )
    state_ttl_seconds: int = Field(
        default=DEFAULT_STATE_TTL_SECONDS,
        description="Lifetime in seconds of stored retry state (1-604800)",
    )
    key_prefix: str = Field(
        default=KEY_PREFIX,
        description="Namespace prepended to request fingerprints",
    )

    model_config = {"frozen": True}

    @field_validator("except_status_codes", mode="before")
    @classmethod
    def validate_except_status_codes(cls, v: Any) -> list[int]:
        """Validate and normalize the ignored status codes.

        Args:
            v: List of status codes or comma-separated string.

        Returns:
            List of integer status codes.

        Raises:
            ValueError: If any code is outside 100-599.

        Example:
            >>> CircuitBreakerConfig(except_status_codes="401, 404").except_status_codes
            [401, 404]
        """
        if isinstance(v, str):
            # Handle comma-separated string (from environment variables)
            v = [code.strip() for code in v.split(",") if code.strip()]

        if not isinstance(v, (list, tuple, set, frozenset)):
            raise ValueError("except_status_codes must be a list or comma-separated string")

        codes = [int(code) for code in v]

        invalid = [code for code in codes if not (100 <= code <= 599)]
        if invalid:
            raise ValueError(
                f"Invalid HTTP status codes: {', '.join(str(c) for c in sorted(invalid))}"
            )

        return codes

    @field_validator("base_delay_minutes")
    @classmethod
    def validate_base_delay_minutes(cls, v: int) -> int:
        """Validate the base delay is positive.

        Raises:
            ValueError: If the delay is less than 1 minute.
        """
        if v < 1:
            raise ValueError(f"base_delay_minutes must be >= 1, got {v}")
        return v

    @field_validator("state_ttl_seconds")
    @classmethod
    def validate_state_ttl_seconds(cls, v: int) -> int:
        """Validate TTL is within acceptable range.

        Raises:
            ValueError: If TTL is not between 1 and 604800 (7 days).
        """
        if not (1 <= v <= 604800):
            raise ValueError(f"state_ttl_seconds must be between 1 and 604800 (7 days), got {v}")
        return v

    @field_validator("key_prefix")
    @classmethod
    def validate_key_prefix(cls, v: str) -> str:
        if not v:
            raise ValueError("key_prefix cannot be empty")
        return v

    @model_validator(mode="after")
    def validate_delay_bounds(self) -> "CircuitBreakerConfig":
        """Validate the cooldown cap is not below the base delay.

        Raises:
            ValueError: If max_delay_minutes < base_delay_minutes.
        """
        if self.max_delay_minutes is not None and self.max_delay_minutes < self.base_delay_minutes:
            raise ValueError(
                f"max_delay_minutes ({self.max_delay_minutes}) must be >= "
                f"base_delay_minutes ({self.base_delay_minutes})"
            )
        return self

    @classmethod
    def from_env(cls, prefix: str = "CIRCUIT_BREAKER_") -> "CircuitBreakerConfig":
        """Create configuration from environment variables.

        Variable names are the upper-cased field names with the prefix,
        e.g. ``CIRCUIT_BREAKER_BASE_DELAY_MINUTES``. Missing variables use
        the defaults. A blank ``MAX_DELAY_MINUTES`` means no cap.

        Args:
            prefix: Prefix for environment variable names.

        Returns:
            CircuitBreakerConfig populated from environment variables.

        Example:
            >>> import os
            >>> os.environ['CIRCUIT_BREAKER_BASE_DELAY_MINUTES'] = '2'
            >>> CircuitBreakerConfig.from_env().base_delay_minutes
            2
        """
        config_dict: dict[str, Any] = {}

        field_types = {
            "except_status_codes": list,
            "base_delay_minutes": int,
            "max_delay_minutes": int | None,
            "state_ttl_seconds": int,
            "key_prefix": str,
        }

        for field_name, field_type in field_types.items():
            env_var = f"{prefix}{field_name.upper()}"
            env_value = os.environ.get(env_var)

            if env_value is None:
                continue

            if field_type == int | None:
                # Blank means "no cap"
                config_dict[field_name] = int(env_value) if env_value.strip() else None
            elif field_type is int:
                config_dict[field_name] = int(env_value)
            else:
                # Lists stay comma-separated, the validator splits them
                config_dict[field_name] = env_value

        return cls(**config_dict)

    @classmethod
    def from_dict(cls, config_dict: dict[str, Any]) -> "CircuitBreakerConfig":
        """Create configuration from a dictionary.

        Raises:
            ValidationError: If the dictionary contains invalid values.
        """
        return cls(**config_dict)
