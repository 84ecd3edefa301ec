"""Google API error envelope models."""

from dataclasses import dataclass
from typing import Any

import httpx


@dataclass
class ErrorBody:
    """Error payload returned by Google APIs.

    Google wraps errors as `{"error": {"code": ..., "message": ..., "status": ...}}`;
    some endpoints return `{"error": "text"}` or a bare string instead.
    """

    message: str | None = None

    # Every other field of the error object
    details: dict[str, Any] | None = None

    @classmethod
    def from_response(cls, response: httpx.Response) -> "ErrorBody | None":
        """Parse the error body of an HTTP response.

        Args:
            response: HTTP response object

        Returns:
            ErrorBody, or None if the body is not JSON or has no recognisable error
        """
        try:
            data = response.json()
        except (ValueError, TypeError, AttributeError):
            # JSON decode errors, type errors, or missing .json() method
            return None

        if isinstance(data, str):
            return cls(message=data)

        if not isinstance(data, dict):
            return None

        error = data.get("error", data)

        if isinstance(error, str):
            return cls(message=error)

        if not isinstance(error, dict):
            return None

        details = {k: v for k, v in error.items() if k != "message"}
        return cls(message=error.get("message"), details=details if details else None)
