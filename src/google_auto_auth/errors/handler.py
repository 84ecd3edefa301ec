"""Error handling utilities for HTTP responses."""

import httpx

from google_auto_auth.errors.exceptions import RemoteSigningError
from google_auto_auth.errors.models import ErrorBody


def raise_for_signing_status(response: httpx.Response) -> None:
    """Raise `RemoteSigningError` for a non-2xx signBlob response.

    The server's error message is used verbatim when present; any other fields
    of the error object are preserved on the exception.

    Args:
        response: HTTP response object

    Raises:
        RemoteSigningError: If the response is not successful
    """
    if response.is_success:
        return

    error_body = ErrorBody.from_response(response)

    if error_body and error_body.message:
        message = error_body.message
    else:
        # Fallback to the raw body text
        response_text = response.text[:200]
        message = response_text if response_text else f"HTTP {response.status_code}"

    raise RemoteSigningError(
        message,
        details=error_body.details if error_body else None,
        status_code=response.status_code,
        response=response,
    )
