"""Response containers and deny-path response synthesis.

When a request is short-circuited the caller never reaches the upstream.
To let it see what went wrong last time, the CircuitOpenError carries a
response rebuilt from the stored snapshot of the last failing response:
same status, same body bytes, no headers.

Examples:
    Synthesizing a response::

        from circuit_breaker_middleware.core.replay import snapshot_response, synthesize_response

        stored = snapshot_response(Response(status_code=503, body=b"down"))
        response = synthesize_response(stored)
        # response.status_code == 503
        # response.headers == {}
        # response.body == b"down"
"""

import base64

from circuit_breaker_middleware.models import StoredResponse


class Response:
    """Framework-agnostic HTTP response.

    Framework adapters convert their own response objects into this
    format before handing them to the middleware.

    Attributes:
        status_code: HTTP status code (e.g., 200, 404, 500)
        headers: Response headers as key-value pairs
        body: Response body as bytes
    """

    def __init__(
        self,
        status_code: int,
        headers: dict[str, str] | None = None,
        body: bytes = b"",
    ) -> None:
        self.status_code = status_code
        self.headers = headers if headers is not None else {}
        self.body = body

    def __repr__(self) -> str:
        return f"<Response [{self.status_code}]>"


def snapshot_response(response: Response) -> StoredResponse:
    """Keep the parts of a failing response needed to synthesize it later.

    Args:
        response: The failing response

    Returns:
        StoredResponse with the status code and the base64-encoded body
    """
    return StoredResponse(
        status_code=response.status_code,
        body_b64=base64.b64encode(response.body).decode("ascii"),
    )


def synthesize_response(stored: StoredResponse | None) -> Response | None:
    """Rebuild a response from a stored snapshot.

    Args:
        stored: Snapshot of the last failing response, or None

    Returns:
        Response with the same status and body and empty headers, or None
        if there is no snapshot
    """
    if stored is None:
        return None

    return Response(
        status_code=stored.status_code,
        headers={},
        body=base64.b64decode(stored.body_b64),
    )
