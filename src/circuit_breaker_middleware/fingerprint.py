"""Request fingerprinting for the circuit breaker.

Requests are identified by their method, full URI (including the query
string) and body. Two requests with the same three components share the
same retry state; any difference gives them independent circuits.
"""

import hashlib
import json
from typing import Any

from circuit_breaker_middleware.exceptions import FingerprintError

KEY_PREFIX = "circuit_breaker_middleware_"


def compute_fingerprint(
    method: str,
    uri: Any,
    body: Any,
    prefix: str = KEY_PREFIX,
) -> str:
    """Compute the storage key for a request.

    The key is computed as follows:
    1. Build an ordered mapping of method, URI and body
    2. Drop empty components (an empty body does not contribute)
    3. JSON encode the remaining components in insertion order
    4. MD5 the encoding and prepend the namespace prefix

    Args:
        method: HTTP method (e.g., "GET", "POST")
        uri: Full request URI; anything with a meaningful ``str()``
        body: Request body as bytes or str
        prefix: Namespace prepended to the digest so keys do not collide
                with unrelated entries in a shared store

    Returns:
        Prefixed hexadecimal MD5 digest

    Raises:
        FingerprintError: If the components cannot be serialized

    Examples:
        >>> compute_fingerprint("GET", "http://example.com", b"")
        'circuit_breaker_middleware_...'
    """
    if isinstance(body, (bytes, bytearray, memoryview)):
        try:
            body = bytes(body).decode("utf-8")
        except UnicodeDecodeError as e:
            raise FingerprintError(
                f"Request body is not valid UTF-8: {e}",
                cause=e,
            ) from e

    components = {
        "method": method,
        "URI": str(uri) if uri is not None else "",
        "body": body,
    }
    # Falsy components are left out so "no body" and "empty body" match
    filtered = {name: value for name, value in components.items() if value}

    try:
        serialized = json.dumps(filtered, separators=(",", ":"))
    except (TypeError, ValueError) as e:
        raise FingerprintError(
            f"Unable to serialize request for fingerprinting: {e}",
            cause=e,
        ) from e

    return prefix + hashlib.md5(serialized.encode("utf-8"), usedforsecurity=False).hexdigest()
