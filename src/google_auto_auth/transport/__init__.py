"""HTTP transport for metadata probes and signBlob calls.

Modules:
    error_logging: Outcome logging around any httpx async transport

Example:
    ```python
    from google_auto_auth.transport import create_http_client

    async with create_http_client(timeout=5.0) as client:
        response = await client.get("http://metadata.google.internal")
    ```
"""

import httpx

from google_auto_auth.transport.error_logging import ErrorLoggingTransport

DEFAULT_TIMEOUT = 10.0


def create_http_client(
    *,
    timeout: float = DEFAULT_TIMEOUT,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Create the `httpx.AsyncClient` used by `AutoAuth`.

    Args:
        timeout: Request timeout in seconds.
        transport: Transport to wrap; defaults to `httpx.AsyncHTTPTransport()`.

    Returns:
        A client whose transport logs every request outcome.
    """
    wrapped = transport if transport is not None else httpx.AsyncHTTPTransport()
    return httpx.AsyncClient(
        transport=ErrorLoggingTransport(wrapped_transport=wrapped),
        timeout=timeout,
    )


__all__ = ["DEFAULT_TIMEOUT", "ErrorLoggingTransport", "create_http_client"]
