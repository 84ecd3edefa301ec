"""Logging transport for the HTTP calls this library makes.

Wraps any httpx async transport and logs each request's outcome. Requests are
never retried here; failures are returned or raised exactly as the wrapped
transport produced them.

```python
from google_auto_auth.transport.error_logging import ErrorLoggingTransport
import httpx

transport = ErrorLoggingTransport(wrapped_transport=httpx.AsyncHTTPTransport())

async with httpx.AsyncClient(transport=transport) as client:
    response = await client.get("http://metadata.google.internal")
```
"""

import logging

import httpx

logger = logging.getLogger(__name__)


class ErrorLoggingTransport(httpx.AsyncBaseTransport):
    """Transport that logs failed responses at warning level and the rest at debug.

    Only the method and URL are logged; headers (which carry bearer tokens) never are.

    Args:
        wrapped_transport: The underlying transport to wrap
    """

    def __init__(self, *, wrapped_transport: httpx.AsyncBaseTransport) -> None:
        self._wrapped_transport = wrapped_transport

    async def __aenter__(self):
        """Enter async context, delegating to wrapped transport."""
        await self._wrapped_transport.__aenter__()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Exit async context, delegating to wrapped transport."""
        return await self._wrapped_transport.__aexit__(exc_type, exc_val, exc_tb)

    async def aclose(self) -> None:
        await self._wrapped_transport.aclose()

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        """Send the request through the wrapped transport and log the outcome.

        Args:
            request: The HTTP request to send

        Returns:
            The wrapped transport's response
        """
        try:
            response = await self._wrapped_transport.handle_async_request(request)
        except httpx.TransportError as e:
            logger.debug(f"Request {request.method} {request.url} failed with {e!r}")
            raise

        if response.status_code >= 400:
            logger.warning(f"Request {request.method} {request.url} failed with {response.status_code}")
        else:
            logger.debug(f"Request {request.method} {request.url} returned {response.status_code}")

        return response
