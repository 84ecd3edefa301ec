"""Structured exceptions for remote API errors."""

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    import httpx


class APIError(Exception):
    """Base exception for API errors."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response: "httpx.Response | None" = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.response = response


class RemoteSigningError(APIError):
    """Non-2xx response from the IAM signBlob endpoint.

    Attributes:
        details: Every field of the server's error object except `message`.
        code: The server-supplied `code` field, if any.
        status: The server-supplied `status` field, if any.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None, **kwargs):
        super().__init__(message, **kwargs)
        self.details = details if details is not None else {}
        self.code = self.details.get("code")
        self.status = self.details.get("status")
